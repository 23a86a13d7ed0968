"""Data models for match enrichment."""

from dataclasses import dataclass, field

from src.collectors.errors import ErrorRecord
from src.data_model.items import FeedAuthor, LolMatchItem
from src.store.protocols import Row


@dataclass
class MatchLookups:
    """Results of the batched lookups for one page of match entries.

    Attributes:
        profiles: Sharer profiles by user id.
        matches: Match records by match id.
        names: Stored summoner names by match id, then puuid.
        participants: Sharer participant rows by (match id, puuid).
        errors: Failed lookups (each treated as empty).
    """

    profiles: dict[str, FeedAuthor] = field(default_factory=dict)
    matches: dict[str, Row] = field(default_factory=dict)
    names: dict[str, dict[str, str]] = field(default_factory=dict)
    participants: dict[tuple[str, str], Row] = field(default_factory=dict)
    errors: list[ErrorRecord] = field(default_factory=list)


@dataclass
class EnrichmentResult:
    """Enriched match items for one page."""

    items: list[LolMatchItem]
    errors: list[ErrorRecord] = field(default_factory=list)
    degraded_count: int = 0
    dropped_count: int = 0
