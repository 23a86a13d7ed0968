"""Per-source fetchers and their query planning.

Each source pages in one of two regimes:

- offset mode (no watermark for the source): skip ``size * (page - 1)``
  rows and take ``size``;
- watermark mode: take ``size`` rows strictly older than the watermark.

Discovery threads ignore both and over-fetch a fixed look-back window,
bounded above by the thread watermark when one exists.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import ClassVar

import structlog

from src.collectors.models import FetchContext, SourceKind
from src.data_model.items import FeedItemType
from src.store.protocols import FeedDataSource, Row, SourceQuery
from src.store.rows import parse_timestamp


logger = structlog.get_logger()


def parse_watermark(watermark: str | None) -> datetime | None:
    """Parse a cursor watermark, warning when it is unparseable.

    Args:
        watermark: Cursor watermark text, if any.

    Returns:
        The watermark instant, or None when absent or unparseable.
    """
    if not watermark:
        return None
    before = parse_timestamp(watermark)
    if before is None:
        logger.warning(
            "watermark_unparseable",
            component="collectors",
            watermark=watermark,
        )
    return before


def plan_range_query(
    size: int,
    page: int,
    watermark: str | None,
) -> SourceQuery:
    """Plan an offset- or watermark-mode query.

    An unparseable watermark is ignored and the source pages by offset.

    Args:
        size: Number of rows wanted.
        page: 1-based page number.
        watermark: Cursor watermark for the source, if any.

    Returns:
        SourceQuery for the source.
    """
    before = parse_watermark(watermark)
    if before is not None:
        return SourceQuery(limit=size, before=before)
    return SourceQuery(offset=size * (max(1, page) - 1), limit=size)


class SourceFetcher(ABC):
    """Base class for the per-source fetchers."""

    kind: ClassVar[SourceKind]
    item_type: ClassVar[FeedItemType]

    @abstractmethod
    def plan(self, context: FetchContext) -> SourceQuery | None:
        """Plan the store query for a page.

        Args:
            context: Page fetch context.

        Returns:
            The query, or None when the source has no quota.
        """

    @abstractmethod
    def query(self, store: FeedDataSource, query: SourceQuery) -> list[Row]:
        """Run a planned query against the store."""

    def watermark(self, context: FetchContext) -> str | None:
        """Get the cursor watermark for this fetcher's item type."""
        if context.cursor is None:
            return None
        return context.cursor.watermark_for(self.item_type)


class RangeFetcher(SourceFetcher):
    """Fetcher paged by offset or by its watermark."""

    def plan(self, context: FetchContext) -> SourceQuery | None:
        size = context.quotas.for_source(self.kind)
        if size <= 0:
            return None
        return plan_range_query(size, context.page, self.watermark(context))


class RecentThreadsFetcher(RangeFetcher):
    """Newest threads, the recency-ordered half of the thread pool."""

    kind = SourceKind.RECENT_THREADS
    item_type = FeedItemType.THREAD

    def query(self, store: FeedDataSource, query: SourceQuery) -> list[Row]:
        return store.fetch_threads(query)


class DiscoverThreadsFetcher(SourceFetcher):
    """Threads from the look-back window, reranked by engagement later."""

    kind = SourceKind.DISCOVER_THREADS
    item_type = FeedItemType.THREAD

    def __init__(self, window_days: int = 30, fetch_cap: int = 80) -> None:
        """Initialize the fetcher.

        Args:
            window_days: Look-back window in days.
            fetch_cap: Number of candidates to over-fetch.
        """
        self._window = timedelta(days=window_days)
        self._fetch_cap = fetch_cap

    def plan(self, context: FetchContext) -> SourceQuery | None:
        if context.quotas.for_source(self.kind) <= 0:
            return None
        return SourceQuery(
            limit=self._fetch_cap,
            since=context.now - self._window,
            before=parse_watermark(self.watermark(context)),
        )

    def query(self, store: FeedDataSource, query: SourceQuery) -> list[Row]:
        return store.fetch_threads(query)


class NewsFetcher(RangeFetcher):
    """Published news, newest publication first."""

    kind = SourceKind.NEWS
    item_type = FeedItemType.NEWS

    def query(self, store: FeedDataSource, query: SourceQuery) -> list[Row]:
        return store.fetch_news(query)


class MatchEntriesFetcher(RangeFetcher):
    """Public match shares, newest first."""

    kind = SourceKind.MATCH_ENTRIES
    item_type = FeedItemType.LOL_MATCH

    def query(self, store: FeedDataSource, query: SourceQuery) -> list[Row]:
        return store.fetch_match_entries(query)
