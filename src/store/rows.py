"""Helpers for normalizing loosely typed store rows."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any


def first_object(value: Any) -> Mapping[str, Any] | None:
    """Normalize a joined sub-object that may be list- or object-shaped.

    Args:
        value: Joined value from a store row.

    Returns:
        The object, the first element of a list, or None.
    """
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, Mapping):
        return value
    return None


def normalize_count(value: Any) -> int:
    """Extract an aggregate count from ``[{"count": n}]``, ``{"count": n}`` or n.

    Args:
        value: Aggregate value from a store row.

    Returns:
        The count, or 0 when absent or malformed.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    obj = first_object(value)
    if obj is None:
        return 0
    count = obj.get("count")
    if isinstance(count, int) and not isinstance(count, bool):
        return count
    return 0


def int_or_default(value: Any, default: int = 0) -> int:
    """Return ``value`` if it is an int (bools excluded), else ``default``."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return default


def number_or_zero(value: Any) -> float:
    """Return ``value`` as float if it is numeric (bools excluded), else 0."""
    if isinstance(value, int | float) and not isinstance(value, bool):
        return float(value)
    return 0.0


def number_as_is(value: Any) -> int | float:
    """Return ``value`` unchanged if it is numeric (bools excluded), else 0."""
    if isinstance(value, int | float) and not isinstance(value, bool):
        return value
    return 0


def str_or_none(value: Any) -> str | None:
    """Return ``value`` if it is a string, else None."""
    return value if isinstance(value, str) else None


def clean_str(value: Any) -> str | None:
    """Return the stripped string, or None for non-strings and blanks."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC.

    Args:
        value: Timestamp string or datetime.

    Returns:
        Timezone-aware datetime, or None when unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC string."""
    return value.astimezone(UTC).isoformat()


def timestamp_text(value: Any, default: str) -> str:
    """Render a row timestamp as text.

    YAML fixtures may yield datetime objects; strings pass through as-is.

    Args:
        value: Timestamp value from a row.
        default: Text used when the value is missing.

    Returns:
        ISO-8601 text.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return format_timestamp(value)
    if value:
        return str(value)
    return default
