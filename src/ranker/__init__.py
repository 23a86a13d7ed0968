"""Engagement ranker for discovery threads.

This module scores thread candidates by decayed recency and engagement
(views, votes, replies), reranks the discovery pool, and merges it behind
the recent pool without duplicates.
"""

from src.ranker.merge import merge_threads
from src.ranker.metrics import RankerMetrics
from src.ranker.models import MergeResult, ScoreComponents, ScoredThread
from src.ranker.scorer import (
    EngagementScorer,
    engagement_components,
    engagement_score,
    recency_boost,
)


__all__ = [
    "EngagementScorer",
    "MergeResult",
    "RankerMetrics",
    "ScoreComponents",
    "ScoredThread",
    "engagement_components",
    "engagement_score",
    "merge_threads",
    "recency_boost",
]
