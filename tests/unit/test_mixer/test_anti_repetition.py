"""Unit tests for the anti-repetition filter."""

from src.data_model.items import (
    FeedAuthor,
    FeedItem,
    LolMatchEntry,
    LolMatchItem,
    NewsItem,
    NewsPayload,
    ThreadItem,
    ThreadPayload,
)
from src.mixer.anti_repetition import AntiRepetitionFilter, author_key
from src.mixer.metrics import MixerMetrics


CREATED_AT = "2025-01-15T10:00:00+00:00"


def _thread(thread_id: str, author_id: str = "a") -> ThreadItem:
    """Create a thread item."""
    return ThreadItem(
        id=thread_id,
        created_at=CREATED_AT,
        thread=ThreadPayload(
            id=thread_id,
            title="t",
            created_at=CREATED_AT,
            author=FeedAuthor(id=author_id),
        ),
    )


def _news(news_id: int) -> NewsItem:
    """Create a news item."""
    return NewsItem(
        id=f"news-{news_id}",
        created_at=CREATED_AT,
        news=NewsPayload(
            id=news_id, title="n", content="", published_at=CREATED_AT
        ),
    )


def _match(entry_id: str, user_id: str = "u") -> LolMatchItem:
    """Create a match item."""
    return LolMatchItem(
        id=f"lol_match-{entry_id}",
        created_at=CREATED_AT,
        entry=LolMatchEntry(
            entry_id=entry_id, match_id="M1", created_at=CREATED_AT, user_id=user_id
        ),
    )


def _ids(items: list[FeedItem]) -> list[str]:
    return [i.id for i in items]


class TestAuthorKey:
    """Tests for author_key."""

    def test_keys(self) -> None:
        """Threads key on author, matches on sharer, news on nothing."""
        assert author_key(_thread("t1", "alice")) == "alice"
        assert author_key(_match("e1", "bob")) == "bob"
        assert author_key(_news(1)) is None

    def test_empty_author_exempt(self) -> None:
        """Empty author ids are not capped."""
        assert author_key(_thread("t1", "")) is None


class TestAntiRepetitionFilter:
    """Tests for AntiRepetitionFilter.apply."""

    def test_no_run_of_three(self) -> None:
        """A third consecutive item of one type is skipped."""
        items = [
            _thread("t1", "a"),
            _thread("t2", "b"),
            _thread("t3", "c"),
            _news(1),
        ]
        out = AntiRepetitionFilter().apply(items, limit=10)
        assert _ids(out) == ["t1", "t2", "news-1"]
        assert MixerMetrics.get_instance().skipped_type_run == 1

    def test_author_cap(self) -> None:
        """An author contributes at most two items."""
        items = [
            _thread("t1"),
            _news(1),
            _thread("t2"),
            _news(2),
            _thread("t3"),
        ]
        out = AntiRepetitionFilter().apply(items, limit=10)
        assert _ids(out) == ["t1", "news-1", "t2", "news-2"]
        assert MixerMetrics.get_instance().skipped_author_cap == 1

    def test_match_sharer_capped(self) -> None:
        """Match items are capped by sharer."""
        items = [
            _match("e1"),
            _thread("t1", "x"),
            _match("e2"),
            _thread("t2", "y"),
            _match("e3"),
        ]
        out = AntiRepetitionFilter().apply(items, limit=10)
        assert _ids(out) == ["lol_match-e1", "t1", "lol_match-e2", "t2"]

    def test_news_exempt_from_author_cap(self) -> None:
        """News items are never author-capped."""
        items = [
            _news(1),
            _thread("t1", "x"),
            _news(2),
            _thread("t2", "y"),
            _news(3),
        ]
        out = AntiRepetitionFilter().apply(items, limit=10)
        assert len(out) == 5

    def test_skipped_items_not_reconsidered(self) -> None:
        """Greedy filtering may under-fill the page."""
        items = [
            _thread("t1", "a"),
            _thread("t2", "b"),
            _thread("t3", "c"),
            _thread("t4", "d"),
            _news(1),
        ]
        out = AntiRepetitionFilter().apply(items, limit=5)
        assert _ids(out) == ["t1", "t2", "news-1"]

    def test_stops_at_limit(self) -> None:
        """No more than ``limit`` items are accepted."""
        items = [_thread("t1", "a"), _news(1), _thread("t2", "b"), _news(2)]
        out = AntiRepetitionFilter().apply(items, limit=2)
        assert _ids(out) == ["t1", "news-1"]

    def test_input_order_kept(self) -> None:
        """Accepted items keep their relative order."""
        items = [_news(1), _match("e1"), _thread("t1"), _news(2)]
        out = AntiRepetitionFilter().apply(items, limit=10)
        assert out == items
