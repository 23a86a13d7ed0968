"""Pagination cursor model."""

from src.data_model.base import WireModel
from src.data_model.items import FeedItemType


class FeedCursor(WireModel):
    """Per-source creation-time watermarks.

    A present key means "on the next fetch, exclude items from that source
    created at or after this timestamp". An absent key means the source has
    no watermark yet and is paged by offset.

    Attributes:
        threads_created_at: Watermark for forum threads.
        news_created_at: Watermark for news posts.
        lol_created_at: Watermark for shared matches.
    """

    threads_created_at: str | None = None
    news_created_at: str | None = None
    lol_created_at: str | None = None

    def watermark_for(self, item_type: FeedItemType) -> str | None:
        """Get the watermark that applies to an item type.

        Args:
            item_type: Feed item type.

        Returns:
            Watermark timestamp or None.
        """
        field_name = CURSOR_FIELD_BY_TYPE.get(item_type)
        if field_name is None:
            return None
        value: str | None = getattr(self, field_name)
        return value


# Item type -> cursor field. Status items carry no watermark.
CURSOR_FIELD_BY_TYPE: dict[FeedItemType, str] = {
    FeedItemType.THREAD: "threads_created_at",
    FeedItemType.NEWS: "news_created_at",
    FeedItemType.LOL_MATCH: "lol_created_at",
}
