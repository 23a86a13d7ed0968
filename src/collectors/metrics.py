"""Metrics collection for the source fetchers."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock

from src.collectors.errors import SourceErrorClass


# Module-level singleton state
_metrics_instance: "CollectorMetrics | None" = None
_metrics_lock: Lock = Lock()


@dataclass
class CollectorMetrics:
    """Thread-safe metrics for source fetches.

    Fetches run on worker threads, so every update takes the instance lock.
    Use get_instance() for singleton access.
    """

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    # Rows returned per source
    rows_by_source: Counter[str] = field(default_factory=Counter)

    # Failures per (source, error class)
    failures_by_source_error: Counter[tuple[str, str]] = field(default_factory=Counter)

    # Last fetch duration per source in milliseconds
    duration_by_source: dict[str, float] = field(default_factory=dict)

    total_rows: int = 0
    total_failures: int = 0
    total_skipped: int = 0

    @classmethod
    def get_instance(cls) -> "CollectorMetrics":
        """Get the singleton instance (thread-safe).

        Returns:
            The shared CollectorMetrics instance.
        """
        global _metrics_instance  # noqa: PLW0603
        if _metrics_instance is None:
            with _metrics_lock:
                if _metrics_instance is None:
                    _metrics_instance = cls()
        return _metrics_instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (for testing)."""
        global _metrics_instance  # noqa: PLW0603
        with _metrics_lock:
            _metrics_instance = None

    def record_rows(self, source_id: str, count: int) -> None:
        """Record rows returned by a source.

        Args:
            source_id: Identifier of the source.
            count: Number of rows.
        """
        with self._lock:
            self.rows_by_source[source_id] += count
            self.total_rows += count

    def record_failure(self, source_id: str, error_class: SourceErrorClass) -> None:
        """Record a source failure.

        Args:
            source_id: Identifier of the source.
            error_class: Classification of the error.
        """
        with self._lock:
            self.failures_by_source_error[(source_id, error_class.value)] += 1
            self.total_failures += 1

    def record_skipped(self) -> None:
        """Record a source skipped for zero quota."""
        with self._lock:
            self.total_skipped += 1

    def record_duration(self, source_id: str, duration_ms: float) -> None:
        """Record fetch duration for a source.

        Args:
            source_id: Identifier of the source.
            duration_ms: Duration in milliseconds.
        """
        with self._lock:
            self.duration_by_source[source_id] = duration_ms

    def get_failures_total(self, source_id: str | None = None) -> int:
        """Get total failures.

        Args:
            source_id: Optional source to filter by.

        Returns:
            Total failure count.
        """
        with self._lock:
            if source_id is None:
                return self.total_failures
            return sum(
                count
                for (sid, _), count in self.failures_by_source_error.items()
                if sid == source_id
            )

    def to_dict(self) -> dict[str, object]:
        """Export metrics as dictionary.

        Returns:
            Dictionary representation of all metrics.
        """
        with self._lock:
            return {
                "total_rows": self.total_rows,
                "total_failures": self.total_failures,
                "total_skipped": self.total_skipped,
                "rows_by_source": dict(self.rows_by_source),
                "failures_by_source_error": dict(self.failures_by_source_error),
                "duration_by_source": dict(self.duration_by_source),
            }
