"""Unit tests for the fetch runner."""

from typing import Any

import pytest

from src.collectors.errors import SourceErrorClass
from src.collectors.metrics import CollectorMetrics
from src.collectors.models import FetchContext, SourceKind, TypeQuotas
from src.collectors.runner import FetchRunner
from src.collectors.state_machine import SourceState
from src.store.errors import StoreUnavailableError
from src.store.memory import InMemoryFeedStore
from src.store.protocols import SourceQuery
from tests.helpers.rows import make_entry_row, make_news_row, make_thread_row
from tests.helpers.time import FIXED_NOW


class RecordingStore(InMemoryFeedStore):
    """In-memory store that records every range query."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.calls: list[tuple[str, SourceQuery]] = []

    def fetch_threads(self, query: SourceQuery) -> list[dict[str, Any]]:
        self.calls.append(("threads", query))
        return super().fetch_threads(query)

    def fetch_news(self, query: SourceQuery) -> list[dict[str, Any]]:
        self.calls.append(("news", query))
        return super().fetch_news(query)

    def fetch_match_entries(self, query: SourceQuery) -> list[dict[str, Any]]:
        self.calls.append(("match_entries", query))
        return super().fetch_match_entries(query)


class BrokenNewsStore(RecordingStore):
    """Store whose news query always fails."""

    def fetch_news(self, query: SourceQuery) -> list[dict[str, Any]]:
        raise StoreUnavailableError("news")


def _make_store(cls: type[RecordingStore] = RecordingStore) -> RecordingStore:
    """Create a store with a few rows of each kind."""
    return cls(
        threads=[make_thread_row(f"t{i}", hours_ago=i) for i in range(5)],
        news=[make_news_row(i, hours_ago=i) for i in range(1, 4)],
        match_entries=[make_entry_row(f"e{i}", hours_ago=i) for i in range(3)],
    )


def _make_context(quotas: TypeQuotas) -> FetchContext:
    """Create a first-page context."""
    return FetchContext(page=1, cursor=None, quotas=quotas, now=FIXED_NOW)


class TestFetchRunner:
    """Tests for FetchRunner.run."""

    @pytest.mark.parametrize("max_workers", [1, 4])
    def test_all_sources_fetched(self, max_workers: int) -> None:
        """Every source returns a result, sequential or parallel."""
        store = _make_store()
        runner = FetchRunner(store, request_id="req", max_workers=max_workers)
        quotas = TypeQuotas(recent=2, discover=2, news=2, lol=2)
        results = runner.run(_make_context(quotas))

        assert set(results.results) == set(SourceKind)
        assert [r["id"] for r in results.rows(SourceKind.RECENT_THREADS)] == [
            "t0",
            "t1",
        ]
        assert len(results.rows(SourceKind.DISCOVER_THREADS)) == 5
        assert len(results.rows(SourceKind.NEWS)) == 2
        assert len(results.rows(SourceKind.MATCH_ENTRIES)) == 2
        assert results.sources_failed == 0

    def test_zero_quota_sources_issue_no_query(self) -> None:
        """Skipped sources never touch the store."""
        store = _make_store()
        runner = FetchRunner(store, request_id="req", max_workers=1)
        results = runner.run(_make_context(TypeQuotas(news=3)))

        assert [name for name, _ in store.calls] == ["news"]
        skipped = results.results[SourceKind.MATCH_ENTRIES]
        assert skipped.state == SourceState.SOURCE_SKIPPED
        assert skipped.rows == []
        assert CollectorMetrics.get_instance().total_skipped == 3

    def test_failing_source_is_isolated(self) -> None:
        """A failing query yields an empty, failed result and others proceed."""
        store = _make_store(BrokenNewsStore)
        runner = FetchRunner(store, request_id="req", max_workers=4)
        results = runner.run(_make_context(TypeQuotas(recent=2, news=2)))

        news = results.results[SourceKind.NEWS]
        assert news.state == SourceState.SOURCE_FAILED
        assert news.rows == []
        assert news.error is not None
        assert news.error.error_class == SourceErrorClass.FETCH
        assert news.error.source_id == "news"
        assert news.error.details == {"exception": "StoreUnavailableError"}
        assert len(results.rows(SourceKind.RECENT_THREADS)) == 2
        assert results.sources_failed == 1
        assert CollectorMetrics.get_instance().get_failures_total("news") == 1

    def test_discovery_settings_applied(self) -> None:
        """The discovery cap is passed through to the query."""
        store = _make_store()
        runner = FetchRunner(
            store, request_id="req", max_workers=1, discovery_fetch_cap=3
        )
        results = runner.run(_make_context(TypeQuotas(discover=1)))

        assert len(results.rows(SourceKind.DISCOVER_THREADS)) == 3
        [(_, query)] = store.calls
        assert query.limit == 3
