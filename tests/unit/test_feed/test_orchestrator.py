"""Unit tests for the feed orchestrator."""

from typing import Any

import pytest

from src.cursor.codec import decode_cursor
from src.feed import orchestrator as orchestrator_module
from src.feed.metrics import FeedMetrics
from src.feed.orchestrator import FeedOrchestrator
from src.settings import FeedSettings
from src.store.errors import StoreUnavailableError
from src.store.memory import InMemoryFeedStore
from src.store.protocols import SourceQuery
from tests.helpers.rows import (
    make_entry_row,
    make_full_roster,
    make_match_row,
    make_news_row,
    make_thread_row,
)
from tests.helpers.time import FIXED_NOW


class NewsDownStore(InMemoryFeedStore):
    """Store whose news query fails."""

    def fetch_news(self, query: SourceQuery) -> list[dict[str, Any]]:
        raise StoreUnavailableError("news")


def _store_kwargs() -> dict[str, Any]:
    """Rows for a store with every content type."""
    return {
        "threads": [
            make_thread_row(f"t{i}", hours_ago=i, author_id=f"a{i}")
            for i in range(12)
        ],
        "news": [make_news_row(i, hours_ago=i + 0.5) for i in range(1, 13)],
        "match_entries": [
            make_entry_row(
                f"e{i}",
                "M1",
                user_id=f"u{i}",
                hours_ago=i + 0.25,
                metadata={"puuid": "p0", "championId": 1},
            )
            for i in range(6)
        ],
        "matches": [make_match_row("M1", make_full_roster())],
    }


def _make_orchestrator(
    store: InMemoryFeedStore | None = None,
) -> FeedOrchestrator:
    """Create an orchestrator pinned to FIXED_NOW."""
    return FeedOrchestrator(
        store or InMemoryFeedStore(**_store_kwargs()),
        settings=FeedSettings(fetch_workers=1),
        now=FIXED_NOW,
        request_id="req-test",
    )


class TestMixedFeed:
    """Tests for the mixed (``all``) feed."""

    def test_default_page(self) -> None:
        """A default request serves a mixed page."""
        status, body = _make_orchestrator().handle({})

        assert status == 200
        assert body["success"] is True
        assert body["page"] == 1
        assert body["limit"] == 20
        assert body["filter"] == "all"
        assert 0 < len(body["items"]) <= 20
        assert {i["type"] for i in body["items"]} == {"thread", "news", "lol_match"}

    def test_item_ids_unique(self) -> None:
        """No item id appears twice."""
        _, body = _make_orchestrator().handle({"limit": "30"})
        ids = [i["id"] for i in body["items"]]
        assert len(ids) == len(set(ids))

    def test_no_type_run_of_three(self) -> None:
        """Three consecutive items never share a type."""
        _, body = _make_orchestrator().handle({})
        types = [i["type"] for i in body["items"]]
        for a, b, c in zip(types, types[1:], types[2:], strict=False):
            assert not a == b == c

    def test_cursor_covers_served_types(self) -> None:
        """The next cursor holds a watermark per served type."""
        _, body = _make_orchestrator().handle({})
        cursor = decode_cursor(body["nextCursor"])
        assert cursor is not None
        assert cursor.threads_created_at is not None
        assert cursor.news_created_at is not None
        assert cursor.lol_created_at is not None

    def test_failing_source_absorbed(self) -> None:
        """A failing source contributes nothing and the page still serves."""
        store = NewsDownStore(**_store_kwargs())
        status, body = _make_orchestrator(store).handle({})

        assert status == 200
        assert body["items"]
        assert all(i["type"] != "news" for i in body["items"])
        assert "errors" not in body
        assert FeedMetrics.get_instance().source_errors == 1


class TestSingleTypeFeed:
    """Tests for single-type filters."""

    def test_news_only(self) -> None:
        """The news filter serves news, newest first, up to the limit."""
        params = {"filter": "news", "limit": "10"}
        status, body = _make_orchestrator().handle(params)

        assert status == 200
        items = body["items"]
        assert [i["id"] for i in items] == [f"news-{n}" for n in range(1, 11)]
        assert body["hasMore"] is True
        cursor = decode_cursor(body["nextCursor"])
        assert cursor is not None
        assert cursor.news_created_at == items[-1]["createdAt"]
        assert cursor.threads_created_at is None

    def test_threads_only_in_recency_order(self) -> None:
        """The threads filter serves recent threads without discovery."""
        _, body = _make_orchestrator().handle({"filter": "threads", "limit": "10"})
        assert [i["id"] for i in body["items"]] == [f"t{i}" for i in range(10)]

    def test_lol_only(self) -> None:
        """The lol filter serves enriched matches."""
        _, body = _make_orchestrator().handle({"filter": "lol", "limit": "10"})
        items = body["items"]
        assert len(items) == 6
        assert all(i["type"] == "lol_match" for i in items)
        assert items[0]["enriched"]["allPlayers"] is not None
        assert body["hasMore"] is False

    def test_status_is_empty(self) -> None:
        """The status filter serves nothing."""
        status, body = _make_orchestrator().handle({"filter": "status"})
        assert status == 200
        assert body["items"] == []
        assert body["hasMore"] is False


class TestFailure:
    """Tests for unexpected failures."""

    def test_unexpected_error_returns_500(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An error outside source isolation yields the generic body."""

        def _boom(*args: Any, **kwargs: Any) -> Any:
            msg = "builder exploded"
            raise RuntimeError(msg)

        monkeypatch.setattr(orchestrator_module, "build_news_item", _boom)
        status, body = _make_orchestrator().handle({})

        assert status == 500
        assert body == {"success": False, "error": "Internal server error"}
        metrics = FeedMetrics.get_instance()
        assert metrics.requests_failed == 1
        assert metrics.requests_total == 1
