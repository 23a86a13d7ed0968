"""Builders turning thread and news rows into feed items."""

import math
import re
from collections.abc import Mapping
from typing import Any

from src.data_model.items import (
    FeedAuthor,
    NewsItem,
    NewsPayload,
    ThreadCategory,
    ThreadItem,
    ThreadPayload,
    WeaponStatsRecord,
)
from src.feed.constants import (
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_CATEGORY_NAME,
    DEFAULT_CATEGORY_SLUG,
    NEWS_HASH_MODULUS,
    NEWS_HASH_MULTIPLIER,
    NEWS_HASH_SEED,
    SUMMARY_ELLIPSIS,
    SUMMARY_MAX_CHARS,
)
from src.store.protocols import Row
from src.store.rows import (
    first_object,
    int_or_default,
    normalize_count,
    str_or_none,
    timestamp_text,
)


_HTML_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def strip_html(text: str) -> str:
    """Replace tags with spaces and collapse whitespace."""
    return _WHITESPACE.sub(" ", _HTML_TAG.sub(" ", text)).strip()


def make_summary(text: str, max_chars: int = SUMMARY_MAX_CHARS) -> str:
    """Plain-text summary, truncated with an ellipsis past ``max_chars``."""
    clean = strip_html(text)
    if len(clean) > max_chars:
        return clean[:max_chars] + SUMMARY_ELLIPSIS
    return clean


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x1_0000_0000 if value & 0x8000_0000 else value


def stable_hash_number(text: str) -> int:
    """Stable non-positive id for rows without a numeric id.

    djb2 variant (``hash = int32(hash * 33) ^ unit``) over the UTF-16
    code units of ``text``, folded to ``-(|hash| mod 1e9)``.

    Args:
        text: Hash input.

    Returns:
        Integer in (-1e9, 0].
    """
    data = text.encode("utf-16-le")
    value = NEWS_HASH_SEED
    for i in range(0, len(data), 2):
        unit = int.from_bytes(data[i : i + 2], "little")
        value = _to_int32(value * NEWS_HASH_MULTIPLIER) ^ unit
    return -(abs(value) % NEWS_HASH_MODULUS)


def news_numeric_id(raw_id: Any, published_at: str, title: str) -> int:
    """Numeric news id: the row id when integral, else a stable hash.

    Args:
        raw_id: Row id (int or numeric string).
        published_at: Publication timestamp text.
        title: News title.

    Returns:
        Integer id.
    """
    if isinstance(raw_id, int) and not isinstance(raw_id, bool):
        return raw_id
    if isinstance(raw_id, float) and math.isfinite(raw_id) and raw_id.is_integer():
        return int(raw_id)
    if isinstance(raw_id, str) and raw_id.strip():
        try:
            parsed = float(raw_id.strip())
        except ValueError:
            parsed = math.nan
        if math.isfinite(parsed) and parsed.is_integer():
            return int(parsed)
    return stable_hash_number(f"{published_at}|{title}")


def _text(value: Any, default: str = "") -> str:
    return default if value is None else str(value)


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _author(raw: Any) -> FeedAuthor:
    obj: Mapping[str, Any] = first_object(raw) or {}
    return FeedAuthor(
        id=_text(obj.get("id")),
        username=str_or_none(obj.get("username")),
        public_id=str_or_none(obj.get("public_id")),
        avatar_url=str_or_none(obj.get("avatar_url")),
        color=str_or_none(obj.get("color")),
    )


def _category(raw: Any) -> ThreadCategory | None:
    obj = first_object(raw)
    if obj is None:
        return None
    return ThreadCategory(
        name=_text(obj.get("name"), DEFAULT_CATEGORY_NAME),
        slug=_text(obj.get("slug"), DEFAULT_CATEGORY_SLUG),
        color=_text(obj.get("color"), DEFAULT_CATEGORY_COLOR),
    )


def _weapon_stats_record(raw: Any) -> WeaponStatsRecord | None:
    obj = first_object(raw)
    if obj is None:
        return None
    return WeaponStatsRecord(
        id=_text(obj.get("id")),
        weapon_name=str_or_none(obj.get("weapon_name")),
        stats=obj.get("stats"),
    )


def build_thread_item(row: Row, fallback_created_at: str) -> ThreadItem | None:
    """Build a thread item from a joined thread row.

    Author, category and weapon record joins may be object- or
    list-shaped.

    Args:
        row: Thread row.
        fallback_created_at: Timestamp used when the row has none.

    Returns:
        ThreadItem, or None when the title is empty.
    """
    title = _text(row.get("title"))
    if not title:
        return None

    thread_id = _text(row.get("id"))
    created_at = timestamp_text(row.get("created_at"), fallback_created_at)
    return ThreadItem(
        id=thread_id,
        created_at=created_at,
        thread=ThreadPayload(
            id=thread_id,
            slug=str_or_none(row.get("slug")),
            title=title,
            content=str_or_none(row.get("content")),
            created_at=created_at,
            views=int_or_default(row.get("views")),
            vote_count=normalize_count(row.get("vote_count")),
            reply_count=normalize_count(row.get("reply_count")),
            category=_category(row.get("category")),
            author=_author(row.get("author")),
            weapon_stats_record=_weapon_stats_record(row.get("weapon_stats_record")),
        ),
    )


def build_news_item(row: Row, fallback_created_at: str) -> NewsItem:
    """Build a news item from a published news row.

    Args:
        row: News row.
        fallback_created_at: Timestamp used when the row has neither a
            publication nor a creation time.

    Returns:
        NewsItem keyed ``news-<numeric id>``.
    """
    published_at = timestamp_text(
        row.get("published_at") or row.get("created_at"), fallback_created_at
    )
    title = _text(row.get("title"))
    numeric_id = news_numeric_id(row.get("id"), published_at, title)
    content = _text(row.get("content") or "")
    views = row.get("views")
    author_name = str_or_none(row.get("author"))

    return NewsItem(
        id=f"news-{numeric_id}",
        created_at=published_at,
        news=NewsPayload(
            id=numeric_id,
            title=title,
            content=content,
            published_at=published_at,
            image_url=None,
            cover_image=str_or_none(row.get("cover_image")),
            views=_int_or_none(views),
            summary=make_summary(content),
            author_name=author_name or None,
        ),
    )
