"""State machine for serving one feed page."""

from enum import Enum

import structlog


logger = structlog.get_logger()


class FeedState(str, Enum):
    """Lifecycle of a page request.

    - PARSE_REQUEST: Parsing query parameters and cursor
    - FAN_OUT_FETCH: Source fetchers running
    - BUILD_ITEMS: Building thread, news and match items
    - SELECT_PATH: Single-type truncation or interleave + filter
    - CURSOR_COMPUTE: Deriving next cursor and has-more
    - RESPOND: Page ready
    - FAILED: Unexpected error, generic failure returned
    """

    PARSE_REQUEST = "PARSE_REQUEST"
    FAN_OUT_FETCH = "FAN_OUT_FETCH"
    BUILD_ITEMS = "BUILD_ITEMS"
    SELECT_PATH = "SELECT_PATH"
    CURSOR_COMPUTE = "CURSOR_COMPUTE"
    RESPOND = "RESPOND"
    FAILED = "FAILED"


# Valid state transitions
_VALID_TRANSITIONS: dict[FeedState, set[FeedState]] = {
    FeedState.PARSE_REQUEST: {FeedState.FAN_OUT_FETCH, FeedState.FAILED},
    FeedState.FAN_OUT_FETCH: {FeedState.BUILD_ITEMS, FeedState.FAILED},
    FeedState.BUILD_ITEMS: {FeedState.SELECT_PATH, FeedState.FAILED},
    FeedState.SELECT_PATH: {FeedState.CURSOR_COMPUTE, FeedState.FAILED},
    FeedState.CURSOR_COMPUTE: {FeedState.RESPOND, FeedState.FAILED},
    FeedState.RESPOND: set(),  # Terminal state
    FeedState.FAILED: set(),  # Terminal state
}


class FeedStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        request_id: str,
        from_state: FeedState,
        to_state: FeedState,
    ) -> None:
        """Initialize the transition error.

        Args:
            request_id: Identifier of the request.
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.request_id = request_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal feed state transition for request '{request_id}': "
            f"{from_state.value} -> {to_state.value}"
        )


class FeedStateMachine:
    """Manages state transitions while serving a page.

    Enforces valid transitions and logs all state changes.
    """

    def __init__(
        self,
        request_id: str,
        initial_state: FeedState = FeedState.PARSE_REQUEST,
    ) -> None:
        """Initialize the state machine.

        Args:
            request_id: Identifier for the request.
            initial_state: Starting state.
        """
        self._request_id = request_id
        self._state = initial_state
        self._log = logger.bind(component="feed", request_id=request_id)

    @property
    def state(self) -> FeedState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in (FeedState.RESPOND, FeedState.FAILED)

    def can_transition_to(self, target: FeedState) -> bool:
        """Check if a transition to the target state is valid.

        Args:
            target: The target state.

        Returns:
            True if the transition is valid.
        """
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: FeedState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            FeedStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise FeedStateTransitionError(
                request_id=self._request_id,
                from_state=self._state,
                to_state=target,
            )

        old_state = self._state
        self._state = target

        self._log.debug(
            "feed_state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )

    def to_fan_out_fetch(self) -> None:
        """Transition to FAN_OUT_FETCH state."""
        self.transition_to(FeedState.FAN_OUT_FETCH)

    def to_build_items(self) -> None:
        """Transition to BUILD_ITEMS state."""
        self.transition_to(FeedState.BUILD_ITEMS)

    def to_select_path(self) -> None:
        """Transition to SELECT_PATH state."""
        self.transition_to(FeedState.SELECT_PATH)

    def to_cursor_compute(self) -> None:
        """Transition to CURSOR_COMPUTE state."""
        self.transition_to(FeedState.CURSOR_COMPUTE)

    def to_respond(self) -> None:
        """Transition to RESPOND state."""
        self.transition_to(FeedState.RESPOND)

    def to_failed(self) -> None:
        """Transition to FAILED state."""
        self.transition_to(FeedState.FAILED)
