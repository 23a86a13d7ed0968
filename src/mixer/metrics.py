"""Metrics collection for the feed mixer."""

from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar


@dataclass
class MixerMetrics:
    """Metrics for interleaving and anti-repetition filtering.

    Requests are served concurrently, so updates take the instance lock.

    Attributes:
        items_interleaved: Items emitted by the interleaver.
        fallback_pops: Slots filled from a fallback bucket.
        skipped_type_run: Candidates skipped for type adjacency.
        skipped_author_cap: Candidates skipped for the per-author cap.
    """

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    items_interleaved: int = 0
    fallback_pops: int = 0
    skipped_type_run: int = 0
    skipped_author_cap: int = 0

    _instance: ClassVar["MixerMetrics | None"] = None
    _instance_lock: ClassVar[Lock] = Lock()

    @classmethod
    def get_instance(cls) -> "MixerMetrics":
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

    def record_interleave(self, emitted: int, fallbacks: int) -> None:
        """Record an interleave pass."""
        with self._lock:
            self.items_interleaved += emitted
            self.fallback_pops += fallbacks

    def record_filtered(self, skipped_type: int, skipped_author: int) -> None:
        """Record a filter pass."""
        with self._lock:
            self.skipped_type_run += skipped_type
            self.skipped_author_cap += skipped_author

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        with self._lock:
            return {
                "items_interleaved": self.items_interleaved,
                "fallback_pops": self.fallback_pops,
                "skipped_type_run": self.skipped_type_run,
                "skipped_author_cap": self.skipped_author_cap,
            }
