"""Source fetchers: per-type quotas, query planning and parallel fan-out."""

from src.collectors.errors import ErrorRecord, SourceErrorClass, SourceFetchError
from src.collectors.fetchers import (
    DiscoverThreadsFetcher,
    MatchEntriesFetcher,
    NewsFetcher,
    RangeFetcher,
    RecentThreadsFetcher,
    SourceFetcher,
    parse_watermark,
    plan_range_query,
)
from src.collectors.metrics import CollectorMetrics
from src.collectors.models import (
    FetchContext,
    FetchResults,
    SourceKind,
    SourceResult,
    TypeQuotas,
)
from src.collectors.runner import FetchRunner
from src.collectors.state_machine import (
    SourceState,
    SourceStateMachine,
    SourceStateTransitionError,
)


__all__ = [
    "CollectorMetrics",
    "DiscoverThreadsFetcher",
    "ErrorRecord",
    "FetchContext",
    "FetchResults",
    "FetchRunner",
    "MatchEntriesFetcher",
    "NewsFetcher",
    "RangeFetcher",
    "RecentThreadsFetcher",
    "SourceErrorClass",
    "SourceFetchError",
    "SourceFetcher",
    "SourceKind",
    "SourceResult",
    "SourceState",
    "SourceStateMachine",
    "SourceStateTransitionError",
    "TypeQuotas",
    "parse_watermark",
    "plan_range_query",
]
