"""Feed orchestrator: serves one page of the home feed.

Pipeline (one state per stage):
    PARSE_REQUEST -> FAN_OUT_FETCH -> BUILD_ITEMS -> SELECT_PATH
        -> CURSOR_COMPUTE -> RESPOND

Source failures are absorbed (the source contributes nothing). Any other
exception moves the request to FAILED and yields the generic 500 body.
"""

import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import structlog

from src.collectors.errors import ErrorRecord
from src.collectors.models import FetchContext, FetchResults, SourceKind, TypeQuotas
from src.collectors.runner import FetchRunner
from src.cursor.codec import encode_cursor
from src.data_model.items import (
    FeedFilter,
    FeedItem,
    FeedItemType,
    NewsItem,
    ThreadItem,
)
from src.enrichment.pipeline import MatchEnrichmentPipeline
from src.feed.constants import INTERNAL_ERROR_MESSAGE
from src.feed.items import build_news_item, build_thread_item
from src.feed.metrics import FeedMetrics
from src.feed.models import FeedErrorResponse, FeedPage, FeedRequest
from src.feed.paging import has_more, next_cursor
from src.feed.state_machine import FeedStateMachine
from src.mixer.anti_repetition import AntiRepetitionFilter
from src.mixer.interleaver import Interleaver
from src.ranker.merge import merge_threads
from src.ranker.scorer import EngagementScorer
from src.settings import FeedSettings
from src.store.protocols import FeedDataSource
from src.store.rows import format_timestamp


logger = structlog.get_logger()


class FeedOrchestrator:
    """Serves home-feed pages from a read-only data source."""

    def __init__(
        self,
        store: FeedDataSource,
        settings: FeedSettings | None = None,
        now: datetime | None = None,
        request_id: str | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            store: Read-only content store.
            settings: Feed settings (defaults from the environment).
            now: Fixed reference time; the wall clock is read per request
                when omitted.
            request_id: Fixed request identifier; a fresh one is generated
                per request when omitted.
        """
        self._store = store
        self._settings = settings or FeedSettings()
        self._now = now
        self._request_id = request_id
        self._metrics = FeedMetrics.get_instance()

    def handle(self, params: Mapping[str, Any]) -> tuple[int, dict[str, Any]]:
        """Serve a page from raw query parameters.

        Args:
            params: Query parameters (``page``, ``limit``, ``cursor``, ``filter``).

        Returns:
            Tuple of (HTTP status, JSON body).
        """
        request_id = self._request_id or str(uuid.uuid4())
        machine = FeedStateMachine(request_id)
        log = logger.bind(component="feed", request_id=request_id)

        try:
            request = FeedRequest.from_query(params, self._settings)
            page = self._serve(request, machine, request_id)
            body = page.to_response()
        except Exception as e:  # noqa: BLE001
            log.exception(
                "feed_request_failed",
                state=machine.state.value,
                error=str(e),
            )
            if not machine.is_terminal:
                machine.to_failed()
            self._metrics.record_failure()
            error = FeedErrorResponse(error=INTERNAL_ERROR_MESSAGE)
            return 500, error.model_dump(by_alias=True, mode="json")

        return 200, body

    def _serve(
        self,
        request: FeedRequest,
        machine: FeedStateMachine,
        request_id: str,
    ) -> FeedPage:
        now = self._now or datetime.now(UTC)
        log = logger.bind(component="feed", request_id=request_id)
        log.info(
            "feed_request_started",
            page=request.page,
            limit=request.limit,
            filter=request.filter.value,
            has_cursor=request.cursor is not None,
        )

        quotas = TypeQuotas.for_request(request.filter, request.limit)

        machine.to_fan_out_fetch()
        runner = FetchRunner(
            self._store,
            request_id=request_id,
            max_workers=self._settings.fetch_workers,
            discovery_window_days=self._settings.discovery_window_days,
            discovery_fetch_cap=self._settings.discovery_fetch_cap,
        )
        fetched = runner.run(
            FetchContext(
                page=request.page,
                cursor=request.cursor,
                quotas=quotas,
                now=now,
            )
        )

        machine.to_build_items()
        fallback_created_at = format_timestamp(now)
        threads = self._build_threads(fetched, quotas, request_id, now)
        news: list[NewsItem] = [
            build_news_item(row, fallback_created_at)
            for row in fetched.rows(SourceKind.NEWS)
        ]
        enrichment = MatchEnrichmentPipeline(
            self._store, request_id=request_id, now=now
        ).enrich(fetched.rows(SourceKind.MATCH_ENTRIES))

        buckets: dict[FeedItemType, list[Any]] = {
            FeedItemType.THREAD: threads,
            FeedItemType.NEWS: news,
            FeedItemType.LOL_MATCH: enrichment.items,
            FeedItemType.STATUS: [],
        }

        machine.to_select_path()
        items = self._select(request.filter, request.limit, buckets)

        machine.to_cursor_compute()
        cursor = next_cursor(request.cursor, items)
        more = has_more(request.filter, request.limit, len(items))
        errors: list[ErrorRecord] = [*fetched.errors, *enrichment.errors]

        machine.to_respond()
        self._metrics.record_page(
            request.filter.value, len(items), more, source_errors=len(errors)
        )
        log.info(
            "feed_request_complete",
            items=len(items),
            has_more=more,
            threads=len(threads),
            news=len(news),
            matches=len(enrichment.items),
            source_errors=len(errors),
        )

        return FeedPage(
            page=request.page,
            limit=request.limit,
            filter=request.filter,
            has_more=more,
            next_cursor=encode_cursor(cursor),
            items=items,
            errors=errors,
        )

    @staticmethod
    def _build_threads(
        fetched: FetchResults,
        quotas: TypeQuotas,
        request_id: str,
        now: datetime,
    ) -> list[ThreadItem]:
        """Rerank discovery, merge behind the recent pool and build items."""
        discover = EngagementScorer(request_id, now=now).rank_discovery(
            fetched.rows(SourceKind.DISCOVER_THREADS), quotas.discover
        )
        merged = merge_threads(fetched.rows(SourceKind.RECENT_THREADS), discover)
        fallback_created_at = format_timestamp(now)

        items: list[ThreadItem] = []
        for row in merged.threads:
            item = build_thread_item(row, fallback_created_at)
            if item is not None:
                items.append(item)
        return items

    @staticmethod
    def _select(
        feed_filter: FeedFilter,
        limit: int,
        buckets: dict[FeedItemType, list[Any]],
    ) -> list[FeedItem]:
        """Single-type truncation, or interleave then anti-repetition."""
        if feed_filter.is_single_type:
            item_type = feed_filter.item_type
            if item_type is None:
                return []
            return list(buckets.get(item_type, [])[:limit])

        interleaved = Interleaver().interleave(buckets, limit)
        return AntiRepetitionFilter().apply(interleaved, limit)
