"""Next-cursor and has-more computation for a served page."""

from collections.abc import Sequence

from src.cursor.models import CURSOR_FIELD_BY_TYPE, FeedCursor
from src.data_model.items import FeedFilter, FeedItem
from src.feed.constants import HAS_MORE_CEILING
from src.store.rows import parse_timestamp


def next_cursor(
    previous: FeedCursor | None, items: Sequence[FeedItem]
) -> FeedCursor:
    """Derive the next page's watermarks.

    Watermarks already present in ``previous`` are carried forward
    unchanged. Each missing one is set to the ``created_at`` of the oldest
    served item of its type. Discovery threads follow engagement order, so
    the last served thread is not necessarily the oldest one.

    Args:
        previous: Cursor the page was requested with.
        items: Served items in order.

    Returns:
        Cursor for the next page.
    """
    values: dict[str, str | None] = (
        previous.model_dump() if previous is not None else {}
    )
    for item_type, field_name in CURSOR_FIELD_BY_TYPE.items():
        if previous is not None and previous.watermark_for(item_type):
            continue
        served = [item for item in items if item.type == item_type.value]
        if served:
            values[field_name] = oldest_created_at(served)
    return FeedCursor(**values)


def oldest_created_at(items: Sequence[FeedItem]) -> str:
    """Pick the oldest ``created_at`` among served items.

    Unparseable timestamps are skipped; when none parse, the last item's
    ``created_at`` is used.

    Args:
        items: Non-empty served items of one type, in order.

    Returns:
        The watermark timestamp text.
    """
    oldest = items[-1].created_at
    oldest_at = parse_timestamp(oldest)
    for item in items:
        created = parse_timestamp(item.created_at)
        if created is not None and (oldest_at is None or created < oldest_at):
            oldest, oldest_at = item.created_at, created
    return oldest


def has_more(feed_filter: FeedFilter, limit: int, served: int) -> bool:
    """Whether the client should request another page.

    Args:
        feed_filter: Requested filter.
        limit: Page size.
        served: Number of items served.

    Returns:
        True when the page came back full.
    """
    if feed_filter.is_single_type:
        return served >= limit
    return served >= max(1, min(limit, HAS_MORE_CEILING))
