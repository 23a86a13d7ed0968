"""Metrics collection for the engagement ranker."""

from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar


@dataclass
class RankerMetrics:
    """Metrics for discovery ranking and thread merging.

    Attributes:
        discovery_candidates: Discovery rows scored.
        discovery_kept: Discovery rows kept after truncation.
        duplicates_dropped: Thread rows dropped by the merge.
        score_values: All scores for percentile calculation.
    """

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    discovery_candidates: int = 0
    discovery_kept: int = 0
    duplicates_dropped: int = 0
    score_values: list[float] = field(default_factory=list)

    _instance: ClassVar["RankerMetrics | None"] = None
    _instance_lock: ClassVar[Lock] = Lock()

    @classmethod
    def get_instance(cls) -> "RankerMetrics":
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

    def record_discovery(self, candidates: int, kept: int) -> None:
        """Record a discovery rerank.

        Args:
            candidates: Rows scored.
            kept: Rows kept.
        """
        with self._lock:
            self.discovery_candidates += candidates
            self.discovery_kept += kept

    def record_duplicates(self, count: int) -> None:
        """Record merge duplicates.

        Args:
            count: Number of duplicates dropped.
        """
        with self._lock:
            self.duplicates_dropped += count

    def record_score(self, score: float) -> None:
        """Record a score for percentile calculation.

        Args:
            score: Score value.
        """
        with self._lock:
            self.score_values.append(score)

    def get_score_percentiles(self) -> dict[str, float]:
        """Calculate score percentiles (p50/p90/p99).

        Returns:
            Dictionary with p50, p90, p99 values.
        """
        with self._lock:
            sorted_scores = sorted(self.score_values)
        if not sorted_scores:
            return {"p50": 0.0, "p90": 0.0, "p99": 0.0}

        n = len(sorted_scores)

        def percentile(p: float) -> float:
            idx = int(p * n / 100)
            return sorted_scores[min(idx, n - 1)]

        return {
            "p50": percentile(50),
            "p90": percentile(90),
            "p99": percentile(99),
        }

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        percentiles = self.get_score_percentiles()
        with self._lock:
            return {
                "discovery_candidates": self.discovery_candidates,
                "discovery_kept": self.discovery_kept,
                "duplicates_dropped": self.duplicates_dropped,
                "score_percentiles": percentiles,
            }
