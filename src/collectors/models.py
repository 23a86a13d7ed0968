"""Data models for the source fetchers."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from src.collectors.constants import (
    DISCOVER_THREADS_RATIO,
    MATCH_ENTRIES_RATIO,
    NEWS_RATIO,
    RECENT_THREADS_RATIO,
)
from src.collectors.errors import ErrorRecord
from src.collectors.state_machine import SourceState
from src.cursor.models import FeedCursor
from src.data_model.items import FeedFilter
from src.store.protocols import Row


class SourceKind(str, Enum):
    """The four independent sources a page draws from."""

    RECENT_THREADS = "recent_threads"
    DISCOVER_THREADS = "discover_threads"
    NEWS = "news"
    MATCH_ENTRIES = "match_entries"


@dataclass(frozen=True)
class TypeQuotas:
    """Per-source fetch sizes for one page.

    Attributes:
        recent: Recent-thread rows.
        discover: Discovery-thread rows kept after reranking.
        news: News rows.
        lol: Match-share rows.
    """

    recent: int = 0
    discover: int = 0
    news: int = 0
    lol: int = 0

    @classmethod
    def for_request(cls, feed_filter: FeedFilter, limit: int) -> "TypeQuotas":
        """Compute quotas for a filter and page limit.

        A single-type filter gives that type the whole limit (threads skip
        discovery). The mixed feed splits it 40/20/20/20, rounding up.

        Args:
            feed_filter: Requested filter.
            limit: Page size.

        Returns:
            TypeQuotas for the page.
        """
        if feed_filter is FeedFilter.THREADS:
            return cls(recent=limit)
        if feed_filter is FeedFilter.NEWS:
            return cls(news=limit)
        if feed_filter is FeedFilter.LOL:
            return cls(lol=limit)
        if feed_filter is FeedFilter.STATUS:
            return cls()
        return cls(
            recent=math.ceil(RECENT_THREADS_RATIO * limit),
            discover=math.ceil(DISCOVER_THREADS_RATIO * limit),
            news=math.ceil(NEWS_RATIO * limit),
            lol=math.ceil(MATCH_ENTRIES_RATIO * limit),
        )

    def for_source(self, kind: SourceKind) -> int:
        """Get the quota for a source."""
        return {
            SourceKind.RECENT_THREADS: self.recent,
            SourceKind.DISCOVER_THREADS: self.discover,
            SourceKind.NEWS: self.news,
            SourceKind.MATCH_ENTRIES: self.lol,
        }[kind]


@dataclass(frozen=True)
class FetchContext:
    """Inputs shared by every fetcher for one page.

    Attributes:
        page: 1-based page number.
        cursor: Decoded cursor, or None.
        quotas: Per-source sizes.
        now: Reference time for the discovery window.
    """

    page: int
    cursor: FeedCursor | None
    quotas: TypeQuotas
    now: datetime


@dataclass(frozen=True)
class SourceResult:
    """Result of fetching one source.

    A failed or skipped source carries no rows.
    """

    kind: SourceKind
    rows: list[Row] = field(default_factory=list)
    error: ErrorRecord | None = None
    state: SourceState = SourceState.SOURCE_DONE
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        """Check if the source did not fail."""
        return self.state != SourceState.SOURCE_FAILED

    @property
    def rows_count(self) -> int:
        """Get number of rows fetched."""
        return len(self.rows)


@dataclass
class FetchResults:
    """Joined results of the four-way fan-out."""

    results: dict[SourceKind, SourceResult] = field(default_factory=dict)

    def rows(self, kind: SourceKind) -> list[Row]:
        """Get the rows of a source (empty when missing or failed)."""
        result = self.results.get(kind)
        return result.rows if result is not None else []

    @property
    def errors(self) -> list[ErrorRecord]:
        """Get the error records of failed sources."""
        return [r.error for r in self.results.values() if r.error is not None]

    @property
    def sources_failed(self) -> int:
        """Count failed sources."""
        return sum(1 for r in self.results.values() if not r.success)
