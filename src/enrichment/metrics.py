"""Metrics collection for match enrichment."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar


@dataclass
class EnrichmentMetrics:
    """Metrics for match enrichment.

    Attributes:
        resolutions_by_method: Resolved seats per disambiguation branch.
        items_enriched: Items built with a roster.
        items_degraded: Items built without a roster.
        entries_dropped: Entries dropped for a missing match id.
        lookup_failures: Failed batched lookups by lookup name.
    """

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    resolutions_by_method: Counter[str] = field(default_factory=Counter)
    items_enriched: int = 0
    items_degraded: int = 0
    entries_dropped: int = 0
    lookup_failures: Counter[str] = field(default_factory=Counter)

    _instance: ClassVar["EnrichmentMetrics | None"] = None
    _instance_lock: ClassVar[Lock] = Lock()

    @classmethod
    def get_instance(cls) -> "EnrichmentMetrics":
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

    def record_resolution(self, method: str) -> None:
        """Record the branch that resolved (or failed to resolve) a seat."""
        with self._lock:
            self.resolutions_by_method[method] += 1

    def record_enriched(self) -> None:
        """Record an item built with a roster."""
        with self._lock:
            self.items_enriched += 1

    def record_degraded(self) -> None:
        """Record an item built without a roster."""
        with self._lock:
            self.items_degraded += 1

    def record_dropped(self, count: int = 1) -> None:
        """Record entries dropped for a missing match id."""
        with self._lock:
            self.entries_dropped += count

    def record_lookup_failure(self, lookup: str) -> None:
        """Record a failed batched lookup."""
        with self._lock:
            self.lookup_failures[lookup] += 1

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        with self._lock:
            return {
                "resolutions_by_method": dict(self.resolutions_by_method),
                "items_enriched": self.items_enriched,
                "items_degraded": self.items_degraded,
                "entries_dropped": self.entries_dropped,
                "lookup_failures": dict(self.lookup_failures),
            }
