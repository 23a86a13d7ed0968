"""Fetch runner with parallel fan-out and failure isolation."""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed

import structlog

from src.collectors.errors import ErrorRecord, SourceErrorClass, SourceFetchError
from src.collectors.fetchers import (
    DiscoverThreadsFetcher,
    MatchEntriesFetcher,
    NewsFetcher,
    RecentThreadsFetcher,
    SourceFetcher,
)
from src.collectors.metrics import CollectorMetrics
from src.collectors.models import FetchContext, FetchResults, SourceKind, SourceResult
from src.collectors.state_machine import SourceState, SourceStateMachine
from src.store.protocols import FeedDataSource


logger = structlog.get_logger()


class FetchRunner:
    """Runs the four source fetchers concurrently for one page.

    Provides:
    - Parallel fan-out on a thread pool, joined before returning
    - Failure isolation (a failing source yields an empty, failed result)
    - Zero-quota sources skipped without a store query
    """

    def __init__(
        self,
        store: FeedDataSource,
        request_id: str,
        max_workers: int = 4,
        discovery_window_days: int = 30,
        discovery_fetch_cap: int = 80,
    ) -> None:
        """Initialize the fetch runner.

        Args:
            store: Read-only content store.
            request_id: Request identifier for logging.
            max_workers: Maximum parallel workers.
            discovery_window_days: Discovery look-back window in days.
            discovery_fetch_cap: Discovery over-fetch size.
        """
        self._store = store
        self._request_id = request_id
        self._max_workers = max_workers
        self._metrics = CollectorMetrics.get_instance()
        self._log = logger.bind(component="collectors", request_id=request_id)
        self._fetchers: list[SourceFetcher] = [
            RecentThreadsFetcher(),
            DiscoverThreadsFetcher(
                window_days=discovery_window_days,
                fetch_cap=discovery_fetch_cap,
            ),
            NewsFetcher(),
            MatchEntriesFetcher(),
        ]

    def run(self, context: FetchContext) -> FetchResults:
        """Fetch every source for a page.

        Args:
            context: Page fetch context.

        Returns:
            FetchResults with one SourceResult per source.
        """
        self._log.debug(
            "fetch_fanout_started",
            page=context.page,
            has_cursor=context.cursor is not None,
            max_workers=self._max_workers,
        )

        results = FetchResults()
        if self._max_workers <= 1:
            for fetcher in self._fetchers:
                results.results[fetcher.kind] = self._run_single_source(
                    fetcher, context
                )
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                future_to_kind = {
                    executor.submit(self._run_single_source, fetcher, context): (
                        fetcher.kind
                    )
                    for fetcher in self._fetchers
                }
                for future in as_completed(future_to_kind):
                    kind = future_to_kind[future]
                    try:
                        results.results[kind] = future.result()
                    except Exception as e:  # noqa: BLE001
                        self._log.error(
                            "source_execution_error",
                            source_id=kind.value,
                            error=str(e),
                        )
                        results.results[kind] = SourceResult(
                            kind=kind,
                            error=ErrorRecord(
                                error_class=SourceErrorClass.FETCH,
                                message=f"Execution error: {e}",
                                source_id=kind.value,
                            ),
                            state=SourceState.SOURCE_FAILED,
                        )

        self._log.debug(
            "fetch_fanout_complete",
            rows={k.value: r.rows_count for k, r in results.results.items()},
            sources_failed=results.sources_failed,
        )
        return results

    def _run_single_source(
        self,
        fetcher: SourceFetcher,
        context: FetchContext,
    ) -> SourceResult:
        """Plan and run the query for one source.

        Args:
            fetcher: Source fetcher.
            context: Page fetch context.

        Returns:
            SourceResult; store exceptions become a failed, empty result.
        """
        kind: SourceKind = fetcher.kind
        machine = SourceStateMachine(kind.value, self._request_id)
        log = self._log.bind(source_id=kind.value)

        query = fetcher.plan(context)
        if query is None:
            machine.to_skipped()
            self._metrics.record_skipped()
            return SourceResult(kind=kind, state=machine.state)

        start_time_ns = time.perf_counter_ns()
        machine.to_fetching()
        try:
            rows = fetcher.query(self._store, query)
        except Exception as e:  # noqa: BLE001
            duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
            machine.to_failed()
            error = SourceFetchError(
                error_class=SourceErrorClass.FETCH,
                message=str(e) or type(e).__name__,
                source_id=kind.value,
                details={"exception": type(e).__name__},
            )
            self._metrics.record_failure(kind.value, error.error_class)
            self._metrics.record_duration(kind.value, duration_ms)
            log.warning("source_fetch_failed", **error.to_dict())
            return SourceResult(
                kind=kind,
                error=ErrorRecord.from_exception(error),
                state=machine.state,
                duration_ms=duration_ms,
            )

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        machine.to_done()
        self._metrics.record_rows(kind.value, len(rows))
        self._metrics.record_duration(kind.value, duration_ms)
        log.debug(
            "source_fetch_complete",
            rows=len(rows),
            offset=query.offset,
            limit=query.limit,
            watermark_mode=query.before is not None,
            duration_ms=round(duration_ms, 2),
        )
        return SourceResult(
            kind=kind,
            rows=list(rows),
            state=machine.state,
            duration_ms=duration_ms,
        )
