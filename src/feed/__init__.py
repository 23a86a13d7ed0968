"""Home feed: request parsing, item building, paging and orchestration."""

from src.data_model.items import FeedFilter
from src.feed.items import (
    build_news_item,
    build_thread_item,
    make_summary,
    news_numeric_id,
    stable_hash_number,
    strip_html,
)
from src.feed.metrics import FeedMetrics
from src.feed.models import FeedErrorResponse, FeedPage, FeedRequest, parse_int
from src.feed.orchestrator import FeedOrchestrator
from src.feed.paging import has_more, next_cursor
from src.feed.state_machine import (
    FeedState,
    FeedStateMachine,
    FeedStateTransitionError,
)


__all__ = [
    "FeedErrorResponse",
    "FeedFilter",
    "FeedMetrics",
    "FeedOrchestrator",
    "FeedPage",
    "FeedRequest",
    "FeedState",
    "FeedStateMachine",
    "FeedStateTransitionError",
    "build_news_item",
    "build_thread_item",
    "has_more",
    "make_summary",
    "news_numeric_id",
    "next_cursor",
    "parse_int",
    "stable_hash_number",
    "strip_html",
]
