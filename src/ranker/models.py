"""Data models for the engagement ranker."""

from dataclasses import dataclass, field

from src.store.protocols import Row


@dataclass(frozen=True)
class ScoreComponents:
    """Breakdown of a thread's engagement score into components.

    Attributes:
        recency_score: Exponentially decayed recency boost.
        views_score: Contribution from view count.
        votes_score: Contribution from vote count.
        replies_score: Contribution from reply count.
        total_score: Sum of all components.
    """

    recency_score: float
    views_score: float
    votes_score: float
    replies_score: float
    total_score: float = 0.0

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for serialization.

        Returns:
            Dictionary of component name to value.
        """
        return {
            "recency_score": self.recency_score,
            "views_score": self.views_score,
            "votes_score": self.votes_score,
            "replies_score": self.replies_score,
            "total_score": self.total_score,
        }


@dataclass
class ScoredThread:
    """A discovery thread row with its computed score.

    Attributes:
        row: Raw thread row from the store.
        components: Score breakdown.
    """

    row: Row
    components: ScoreComponents


@dataclass
class MergeResult:
    """Result of merging recent and discovery thread candidates.

    Attributes:
        threads: Merged rows, recent first, unique by id.
        recent_count: Rows offered by the recent pool.
        discover_count: Rows offered by the discovery pool.
        duplicates_dropped: Rows removed because their id was already seen.
        dropped_ids: Ids of removed duplicates, in encounter order.
    """

    threads: list[Row]
    recent_count: int
    discover_count: int
    duplicates_dropped: int = 0
    dropped_ids: list[str] = field(default_factory=list)

    @property
    def final_count(self) -> int:
        """Get merged row count."""
        return len(self.threads)
