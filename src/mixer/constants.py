"""Constants for the feed mixer."""

from src.data_model.items import FeedItemType


_T = FeedItemType.THREAD
_N = FeedItemType.NEWS
_M = FeedItemType.LOL_MATCH

# Slot pattern, repeated cyclically. Status has no slot.
INTERLEAVE_PATTERN: tuple[FeedItemType, ...] = (_T, _T, _N, _T, _M) * 4

# Bucket order tried when a slot's type is exhausted
FALLBACK_ORDER: tuple[FeedItemType, ...] = (
    FeedItemType.THREAD,
    FeedItemType.NEWS,
    FeedItemType.LOL_MATCH,
    FeedItemType.STATUS,
)

# A candidate is skipped when this many accepted items in a row share its type
MAX_TYPE_RUN: int = 2

MAX_ITEMS_PER_AUTHOR: int = 2
