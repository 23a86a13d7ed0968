"""Greedy anti-repetition filter over an interleaved sequence."""

from collections import Counter
from collections.abc import Sequence

import structlog

from src.data_model.items import FeedItem, LolMatchItem, ThreadItem
from src.mixer.constants import MAX_ITEMS_PER_AUTHOR, MAX_TYPE_RUN
from src.mixer.metrics import MixerMetrics


logger = structlog.get_logger()


def author_key(item: FeedItem) -> str | None:
    """Author used for the per-author cap.

    Threads key on the author id and matches on the sharer's user id.
    News and status items are exempt, as are empty keys.
    """
    if isinstance(item, ThreadItem):
        return item.thread.author.id or None
    if isinstance(item, LolMatchItem):
        return item.entry.user_id or None
    return None


class AntiRepetitionFilter:
    """Single greedy pass limiting type runs and per-author counts.

    Skipped items are not reconsidered, so the output may hold fewer than
    ``limit`` items even when the input holds more.
    """

    def __init__(
        self,
        max_type_run: int = MAX_TYPE_RUN,
        max_per_author: int = MAX_ITEMS_PER_AUTHOR,
        metrics: MixerMetrics | None = None,
    ) -> None:
        """Initialize the filter.

        Args:
            max_type_run: Longest allowed run of one type.
            max_per_author: Most items accepted per author.
            metrics: Optional metrics instance.
        """
        self._max_type_run = max_type_run
        self._max_per_author = max_per_author
        self._metrics = metrics or MixerMetrics.get_instance()

    def apply(self, items: Sequence[FeedItem], limit: int) -> list[FeedItem]:
        """Filter items in order, stopping at ``limit`` accepted.

        Args:
            items: Interleaved candidates.
            limit: Maximum output length.

        Returns:
            Accepted items in input order.
        """
        out: list[FeedItem] = []
        author_counts: Counter[str] = Counter()
        skipped_type = 0
        skipped_author = 0

        for item in items:
            if len(out) >= limit:
                break

            tail = out[-self._max_type_run :]
            if len(tail) == self._max_type_run and all(
                prev.type == item.type for prev in tail
            ):
                skipped_type += 1
                continue

            author = author_key(item)
            if author is not None:
                if author_counts[author] >= self._max_per_author:
                    skipped_author += 1
                    continue
                author_counts[author] += 1

            out.append(item)

        self._metrics.record_filtered(skipped_type, skipped_author)
        logger.debug(
            "anti_repetition_applied",
            component="mixer",
            subcomponent="anti_repetition",
            candidates=len(items),
            accepted=len(out),
            skipped_type=skipped_type,
            skipped_author=skipped_author,
        )
        return out
