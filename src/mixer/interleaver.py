"""Deterministic interleaving of per-type buckets."""

from collections.abc import Mapping, Sequence
from typing import Protocol, TypeVar

import structlog

from src.data_model.items import FeedItemType
from src.mixer.constants import FALLBACK_ORDER, INTERLEAVE_PATTERN
from src.mixer.metrics import MixerMetrics


logger = structlog.get_logger()


class Typed(Protocol):
    """Anything carrying a feed item type tag."""

    @property
    def type(self) -> str: ...


T = TypeVar("T", bound=Typed)


class Interleaver:
    """Merges per-type buckets under a fixed cyclic slot pattern.

    Buckets are never mutated; a next-index per type tracks consumption.
    A slot whose type is exhausted takes the next item of the first
    non-empty bucket in fallback order.
    """

    def __init__(
        self,
        pattern: Sequence[FeedItemType] = INTERLEAVE_PATTERN,
        fallback_order: Sequence[FeedItemType] = FALLBACK_ORDER,
        metrics: MixerMetrics | None = None,
    ) -> None:
        """Initialize the interleaver.

        Args:
            pattern: Slot types, repeated cyclically.
            fallback_order: Bucket order for exhausted slots.
            metrics: Optional metrics instance.
        """
        if not pattern:
            msg = "pattern must not be empty"
            raise ValueError(msg)
        self._pattern = tuple(pattern)
        self._fallback_order = tuple(fallback_order)
        self._metrics = metrics or MixerMetrics.get_instance()

    def interleave(
        self,
        buckets: Mapping[FeedItemType, Sequence[T]],
        limit: int,
    ) -> list[T]:
        """Interleave buckets into at most ``limit`` items.

        Args:
            buckets: Items per type, each in priority order.
            limit: Maximum output length.

        Returns:
            Interleaved items; stops early when every bucket is exhausted.
        """
        positions: dict[FeedItemType, int] = dict.fromkeys(self._fallback_order, 0)
        for item_type in buckets:
            positions.setdefault(item_type, 0)

        def remaining(item_type: FeedItemType) -> bool:
            return positions[item_type] < len(buckets.get(item_type, ()))

        def take(item_type: FeedItemType) -> T:
            item = buckets[item_type][positions[item_type]]
            positions[item_type] += 1
            return item

        out: list[T] = []
        slot = 0
        fallbacks = 0

        while len(out) < limit:
            slot_type = self._pattern[slot % len(self._pattern)]
            slot += 1

            if remaining(slot_type):
                out.append(take(slot_type))
                continue

            fallback_type = next(
                (t for t in self._fallback_order if remaining(t)), None
            )
            if fallback_type is None:
                break
            fallbacks += 1
            out.append(take(fallback_type))

        self._metrics.record_interleave(len(out), fallbacks)
        logger.debug(
            "buckets_interleaved",
            component="mixer",
            subcomponent="interleaver",
            limit=limit,
            output=len(out),
            fallbacks=fallbacks,
        )
        return out
