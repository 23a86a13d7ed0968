"""Shared, deterministic timestamps for tests."""

from datetime import UTC, datetime, timedelta


# Fixed "now" so recency scores and the discovery window are deterministic.
FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


def iso_hours_ago(hours: float) -> str:
    """ISO timestamp ``hours`` before FIXED_NOW."""
    return (FIXED_NOW - timedelta(hours=hours)).isoformat()
