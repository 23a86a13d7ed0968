"""Opaque pagination cursor carrying per-source watermarks."""

from src.cursor.codec import decode_cursor, encode_cursor
from src.cursor.models import CURSOR_FIELD_BY_TYPE, FeedCursor


__all__ = [
    "CURSOR_FIELD_BY_TYPE",
    "FeedCursor",
    "decode_cursor",
    "encode_cursor",
]
