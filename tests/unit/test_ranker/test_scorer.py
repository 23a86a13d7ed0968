"""Unit tests for the engagement scorer."""

import math
from datetime import timedelta

import pytest

from src.ranker.constants import RECENCY_BOOST_MAX
from src.ranker.metrics import RankerMetrics
from src.ranker.scorer import (
    EngagementScorer,
    engagement_components,
    engagement_score,
    recency_boost,
)
from tests.helpers.rows import make_thread_row
from tests.helpers.time import FIXED_NOW


def _make_scorer() -> EngagementScorer:
    """Create a scorer pinned to FIXED_NOW."""
    return EngagementScorer(request_id="test", now=FIXED_NOW)


class TestRecencyBoost:
    """Tests for recency_boost."""

    def test_fresh_item_gets_full_boost(self) -> None:
        """An item created now gets the maximum boost."""
        assert recency_boost(FIXED_NOW, FIXED_NOW) == pytest.approx(RECENCY_BOOST_MAX)

    def test_decays_over_72_hours(self) -> None:
        """After one decay constant the boost is max/e."""
        created = FIXED_NOW - timedelta(hours=72)
        assert recency_boost(created, FIXED_NOW) == pytest.approx(8 / math.e)

    def test_future_item_treated_as_fresh(self) -> None:
        """Negative ages clamp to zero."""
        created = FIXED_NOW + timedelta(hours=5)
        assert recency_boost(created, FIXED_NOW) == pytest.approx(RECENCY_BOOST_MAX)


class TestEngagementScore:
    """Tests for the engagement score formula."""

    def test_components_sum_to_total(self) -> None:
        """Total is the sum of the weighted components."""
        c = engagement_components(
            FIXED_NOW, views=99, votes=9, replies=9, now=FIXED_NOW
        )
        assert c.views_score == pytest.approx(2.0)
        assert c.votes_score == pytest.approx(4.0)
        assert c.replies_score == pytest.approx(6.0)
        assert c.total_score == pytest.approx(8.0 + 2.0 + 4.0 + 6.0)

    def test_zero_engagement_is_recency_only(self) -> None:
        """With no engagement only recency contributes."""
        created = FIXED_NOW - timedelta(hours=10)
        score = engagement_score(created, 0, 0, 0, FIXED_NOW)
        assert score == pytest.approx(recency_boost(created, FIXED_NOW))

    @pytest.mark.parametrize("field", ["views", "votes", "replies"])
    def test_monotone_in_each_count(self, field: str) -> None:
        """Raising one count never lowers the score."""
        base = {"views": 5, "votes": 5, "replies": 5}
        bumped = dict(base, **{field: 6})
        assert engagement_score(FIXED_NOW, now=FIXED_NOW, **bumped) > engagement_score(
            FIXED_NOW, now=FIXED_NOW, **base
        )

    def test_older_scores_lower(self) -> None:
        """With equal engagement, older items score lower."""
        newer = engagement_score(FIXED_NOW - timedelta(hours=1), 1, 1, 1, FIXED_NOW)
        older = engagement_score(FIXED_NOW - timedelta(hours=2), 1, 1, 1, FIXED_NOW)
        assert newer > older

    def test_to_dict(self) -> None:
        """Components serialize to a flat dict."""
        c = engagement_components(FIXED_NOW, 0, 0, 0, FIXED_NOW)
        assert set(c.to_dict()) == {
            "recency_score",
            "views_score",
            "votes_score",
            "replies_score",
            "total_score",
        }


class TestEngagementScorer:
    """Tests for EngagementScorer."""

    def test_score_row_reads_array_and_object_counts(self) -> None:
        """Aggregates are read from list- and object-shaped joins."""
        row = make_thread_row(hours_ago=0, views=99, votes=9, replies=9)
        scored = _make_scorer().score_row(row)
        assert scored.components.votes_score == pytest.approx(4.0)
        assert scored.components.replies_score == pytest.approx(6.0)

    def test_score_row_missing_created_at(self) -> None:
        """Rows without a timestamp are scored as if created now."""
        row = make_thread_row(created_at=None)
        scored = _make_scorer().score_row(row)
        assert scored.components.recency_score == pytest.approx(RECENCY_BOOST_MAX)

    def test_rank_discovery_orders_by_score(self) -> None:
        """Higher engagement ranks first."""
        rows = [
            make_thread_row("quiet", hours_ago=1),
            make_thread_row("busy", hours_ago=48, votes=50, replies=40),
        ]
        ranked = _make_scorer().rank_discovery(rows, quota=2)
        assert [r["id"] for r in ranked] == ["busy", "quiet"]

    def test_rank_discovery_truncates_to_quota(self) -> None:
        """Only the top ``quota`` rows are kept."""
        rows = [make_thread_row(f"t{i}", hours_ago=i) for i in range(10)]
        ranked = _make_scorer().rank_discovery(rows, quota=3)
        assert [r["id"] for r in ranked] == ["t0", "t1", "t2"]

    def test_rank_discovery_is_stable_on_ties(self) -> None:
        """Equal scores keep the input order."""
        rows = [make_thread_row(f"t{i}", hours_ago=5) for i in range(4)]
        ranked = _make_scorer().rank_discovery(rows, quota=4)
        assert [r["id"] for r in ranked] == ["t0", "t1", "t2", "t3"]

    @pytest.mark.parametrize("quota", [0, -1])
    def test_rank_discovery_zero_quota(self, quota: int) -> None:
        """A non-positive quota keeps nothing."""
        assert _make_scorer().rank_discovery([make_thread_row()], quota) == []

    def test_rank_discovery_records_metrics(self) -> None:
        """Candidates and kept rows are counted."""
        rows = [make_thread_row(f"t{i}") for i in range(5)]
        _make_scorer().rank_discovery(rows, quota=2)
        metrics = RankerMetrics.get_instance()
        assert metrics.discovery_candidates == 5
        assert metrics.discovery_kept == 2
        assert len(metrics.score_values) == 5
