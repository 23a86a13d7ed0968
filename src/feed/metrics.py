"""Metrics collection for the feed orchestrator."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar


@dataclass
class FeedMetrics:
    """Metrics for served feed pages.

    Pages are served from a thread pool, so updates take the instance lock.

    Attributes:
        requests_total: Page requests handled.
        requests_failed: Requests answered with the generic failure.
        requests_by_filter: Requests per filter value.
        items_served: Items returned across all pages.
        pages_with_more: Pages reporting more content.
        source_errors: Per-source failures absorbed into served pages.
    """

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    requests_total: int = 0
    requests_failed: int = 0
    requests_by_filter: Counter[str] = field(default_factory=Counter)
    items_served: int = 0
    pages_with_more: int = 0
    source_errors: int = 0

    _instance: ClassVar["FeedMetrics | None"] = None
    _instance_lock: ClassVar[Lock] = Lock()

    @classmethod
    def get_instance(cls) -> "FeedMetrics":
        """Get singleton metrics instance."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def record_page(
        self, feed_filter: str, items: int, has_more: bool, source_errors: int
    ) -> None:
        """Record a served page."""
        with self._lock:
            self.requests_total += 1
            self.requests_by_filter[feed_filter] += 1
            self.items_served += items
            self.source_errors += source_errors
            if has_more:
                self.pages_with_more += 1

    def record_failure(self) -> None:
        """Record a request answered with the generic failure."""
        with self._lock:
            self.requests_total += 1
            self.requests_failed += 1

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        with self._lock:
            return {
                "requests_total": self.requests_total,
                "requests_failed": self.requests_failed,
                "requests_by_filter": dict(self.requests_by_filter),
                "items_served": self.items_served,
                "pages_with_more": self.pages_with_more,
                "source_errors": self.source_errors,
            }
