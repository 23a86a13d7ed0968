"""Engagement scoring for discovery threads.

Scoring formula:
    score = recency + log10(1 + views) * VIEWS_WEIGHT
                    + log10(1 + votes) * VOTES_WEIGHT
                    + log10(1 + replies) * REPLIES_WEIGHT

    recency = RECENCY_BOOST_MAX * exp(-age_hours / RECENCY_DECAY_HOURS)

The score only reranks the discovery pool; the recent pool stays in pure
recency order.
"""

import math
from datetime import UTC, datetime

import structlog

from src.ranker.constants import (
    RECENCY_BOOST_MAX,
    RECENCY_DECAY_HOURS,
    REPLIES_WEIGHT,
    SECONDS_PER_HOUR,
    VIEWS_WEIGHT,
    VOTES_WEIGHT,
)
from src.ranker.metrics import RankerMetrics
from src.ranker.models import ScoreComponents, ScoredThread
from src.store.protocols import Row
from src.store.rows import int_or_default, normalize_count, parse_timestamp


logger = structlog.get_logger()


def recency_boost(created_at: datetime, now: datetime) -> float:
    """Compute the decayed recency boost.

    Args:
        created_at: Item creation time.
        now: Reference time. Future items are treated as age 0.

    Returns:
        Boost in (0, RECENCY_BOOST_MAX].
    """
    age_hours = max(0.0, (now - created_at).total_seconds() / SECONDS_PER_HOUR)
    return RECENCY_BOOST_MAX * math.exp(-age_hours / RECENCY_DECAY_HOURS)


def engagement_components(
    created_at: datetime,
    views: int,
    votes: int,
    replies: int,
    now: datetime,
) -> ScoreComponents:
    """Compute the engagement score breakdown.

    Args:
        created_at: Item creation time.
        views: View count.
        votes: Vote count.
        replies: Reply count.
        now: Reference time.

    Returns:
        ScoreComponents with the total filled in.
    """
    recency = recency_boost(created_at, now)
    views_score = math.log10(1 + max(0, views)) * VIEWS_WEIGHT
    votes_score = math.log10(1 + max(0, votes)) * VOTES_WEIGHT
    replies_score = math.log10(1 + max(0, replies)) * REPLIES_WEIGHT
    return ScoreComponents(
        recency_score=recency,
        views_score=views_score,
        votes_score=votes_score,
        replies_score=replies_score,
        total_score=recency + views_score + votes_score + replies_score,
    )


def engagement_score(
    created_at: datetime,
    views: int,
    votes: int,
    replies: int,
    now: datetime,
) -> float:
    """Pure function API for the engagement score."""
    return engagement_components(created_at, views, votes, replies, now).total_score


class EngagementScorer:
    """Scores and reranks discovery thread rows."""

    def __init__(
        self,
        request_id: str,
        now: datetime | None = None,
        metrics: RankerMetrics | None = None,
    ) -> None:
        """Initialize the scorer.

        Args:
            request_id: Request identifier for logging.
            now: Reference time for recency (defaults to now).
            metrics: Optional metrics instance.
        """
        self._now = now or datetime.now(UTC)
        self._metrics = metrics or RankerMetrics.get_instance()
        self._log = logger.bind(
            component="ranker",
            subcomponent="scorer",
            request_id=request_id,
        )

    def score_row(self, row: Row) -> ScoredThread:
        """Score a single thread row.

        Rows with a missing or unparseable ``created_at`` are scored as if
        created now.

        Args:
            row: Thread row with views, vote and reply aggregates.

        Returns:
            ScoredThread for the row.
        """
        created_at = parse_timestamp(row.get("created_at")) or self._now
        components = engagement_components(
            created_at=created_at,
            views=int_or_default(row.get("views")),
            votes=normalize_count(row.get("vote_count")),
            replies=normalize_count(row.get("reply_count")),
            now=self._now,
        )
        return ScoredThread(row=row, components=components)

    def rank_discovery(self, rows: list[Row], quota: int) -> list[Row]:
        """Rerank discovery candidates by score and keep the top ``quota``.

        Ties keep the store's recency order (stable sort).

        Args:
            rows: Discovery candidates, newest first.
            quota: Number of rows to keep.

        Returns:
            Top rows by engagement score.
        """
        if quota <= 0 or not rows:
            return []

        scored = [self.score_row(row) for row in rows]
        for s in scored:
            self._metrics.record_score(s.components.total_score)

        scored.sort(key=lambda s: s.components.total_score, reverse=True)
        kept = [s.row for s in scored[:quota]]

        self._metrics.record_discovery(candidates=len(rows), kept=len(kept))
        self._log.debug(
            "discovery_ranked",
            candidates=len(rows),
            kept=len(kept),
            top_score=round(scored[0].components.total_score, 4),
        )
        return kept
