"""Request and response models for the home feed."""

import re
from collections.abc import Mapping
from typing import Any

from pydantic import Field

from src.collectors.errors import ErrorRecord
from src.cursor.codec import decode_cursor
from src.cursor.models import FeedCursor
from src.data_model.base import StrictBaseModel, WireModel
from src.data_model.items import FeedFilter, FeedItem
from src.settings import FeedSettings


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any) -> int | None:
    """Parse a leading integer from a query value ("3abc" -> 3).

    Args:
        value: Raw query value.

    Returns:
        The integer, or None when there is none.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


class FeedRequest(StrictBaseModel):
    """Parsed page request.

    Attributes:
        page: 1-based page number.
        limit: Page size, within the configured bounds.
        filter: Requested content filter.
        cursor: Decoded cursor, or None for missing/malformed tokens.
    """

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)
    filter: FeedFilter = FeedFilter.ALL
    cursor: FeedCursor | None = None

    @classmethod
    def from_query(
        cls,
        params: Mapping[str, Any],
        settings: FeedSettings | None = None,
    ) -> "FeedRequest":
        """Build a request from raw query parameters.

        Parsing is lenient: unparseable values fall back to defaults,
        ``limit`` is clamped and unknown filters mean ``all``.

        Args:
            params: Query parameters (``page``, ``limit``, ``cursor``, ``filter``).
            settings: Limit bounds; defaults are used when omitted.

        Returns:
            FeedRequest.
        """
        settings = settings or FeedSettings()

        page = parse_int(params.get("page"))
        limit = parse_int(params.get("limit"))
        if limit is None:
            limit = settings.default_limit

        raw_filter = params.get("filter")
        try:
            feed_filter = FeedFilter(raw_filter) if raw_filter else FeedFilter.ALL
        except ValueError:
            feed_filter = FeedFilter.ALL

        cursor_token = params.get("cursor")
        return cls(
            page=max(1, page if page is not None else 1),
            limit=min(settings.max_limit, max(settings.min_limit, limit)),
            filter=feed_filter,
            cursor=decode_cursor(
                cursor_token if isinstance(cursor_token, str) else None
            ),
        )


class FeedPage(WireModel):
    """One served page of the home feed.

    ``errors`` records per-source failures for logging and is never
    serialized to clients.
    """

    success: bool = True
    page: int
    limit: int
    filter: FeedFilter
    has_more: bool
    next_cursor: str
    items: list[FeedItem] = Field(default_factory=list)
    errors: list[ErrorRecord] = Field(default_factory=list, exclude=True)

    def to_response(self) -> dict[str, Any]:
        """Serialize to the camelCase wire form."""
        return self.model_dump(by_alias=True, mode="json")


class FeedErrorResponse(WireModel):
    """Generic failure body."""

    success: bool = False
    error: str
