"""Merge of recent and discovery thread candidates."""

import structlog

from src.ranker.metrics import RankerMetrics
from src.ranker.models import MergeResult
from src.store.protocols import Row


logger = structlog.get_logger()


def merge_threads(
    recent: list[Row],
    discover: list[Row],
    metrics: RankerMetrics | None = None,
) -> MergeResult:
    """Concatenate recent then discovery rows, unique by id.

    The first occurrence of an id wins, so a thread present in both pools
    keeps its recent-pool copy. Rows without an id are dropped.

    Args:
        recent: Recent-pool rows in final order.
        discover: Reranked, truncated discovery rows.
        metrics: Optional metrics instance.

    Returns:
        MergeResult with the merged rows and statistics.
    """
    seen: set[str] = set()
    merged: list[Row] = []
    dropped_ids: list[str] = []

    for row in [*recent, *discover]:
        raw_id = row.get("id")
        thread_id = "" if raw_id is None else str(raw_id)
        if not thread_id:
            continue
        if thread_id in seen:
            dropped_ids.append(thread_id)
            continue
        seen.add(thread_id)
        merged.append(row)

    result = MergeResult(
        threads=merged,
        recent_count=len(recent),
        discover_count=len(discover),
        duplicates_dropped=len(dropped_ids),
        dropped_ids=dropped_ids,
    )

    (metrics or RankerMetrics.get_instance()).record_duplicates(len(dropped_ids))
    logger.debug(
        "threads_merged",
        component="ranker",
        subcomponent="merge",
        recent_count=result.recent_count,
        discover_count=result.discover_count,
        merged_count=result.final_count,
        duplicates_dropped=result.duplicates_dropped,
    )
    return result
