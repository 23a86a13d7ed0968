"""Feed item models shared by the enrichment, mixer and feed packages.

A feed item is a tagged union discriminated on ``type``. Every variant
carries a feed-unique ``id`` and the ISO-8601 ``created_at`` used for
cursor watermarks.
"""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import Field, SerializerFunctionWrapHandler, model_serializer

from src.data_model.base import WireModel


class FeedItemType(str, Enum):
    """Content types that can appear in the feed."""

    THREAD = "thread"
    NEWS = "news"
    LOL_MATCH = "lol_match"
    STATUS = "status"


class FeedFilter(str, Enum):
    """Content filter requested by the client."""

    ALL = "all"
    THREADS = "threads"
    NEWS = "news"
    LOL = "lol"
    STATUS = "status"

    @property
    def is_single_type(self) -> bool:
        """Check if the filter restricts the feed to one content type."""
        return self is not FeedFilter.ALL

    @property
    def item_type(self) -> "FeedItemType | None":
        """Get the item type a single-type filter selects."""
        return _ITEM_TYPE_BY_FILTER.get(self)


class FeedAuthor(WireModel):
    """Public profile fields of a thread author or match sharer."""

    id: str
    username: str | None = None
    public_id: str | None = None
    avatar_url: str | None = None
    color: str | None = None


class ThreadCategory(WireModel):
    """Forum category attached to a thread."""

    name: str
    slug: str
    color: str


class WeaponStatsRecord(WireModel):
    """Optional weapon statistics record linked from a thread."""

    id: str
    weapon_name: str | None = None
    stats: Any = None


class ThreadPayload(WireModel):
    """Normalized forum thread."""

    id: str
    slug: str | None = None
    title: str
    content: str | None = None
    created_at: str
    views: int = 0
    vote_count: int = 0
    reply_count: int = 0
    category: ThreadCategory | None = None
    author: FeedAuthor
    weapon_stats_record: WeaponStatsRecord | None = None


class ThreadItem(WireModel):
    """Feed entry wrapping a forum thread."""

    type: Literal["thread"] = "thread"
    id: str
    created_at: str
    thread: ThreadPayload


class NewsPayload(WireModel):
    """Normalized published news post."""

    id: int
    title: str
    content: str
    published_at: str
    image_url: str | None = None
    cover_image: str | None = None
    views: int | None = None
    comments_count: int | None = None
    summary: str = ""
    author_name: str | None = None
    author_color: str | None = None
    author_avatar: str | None = None
    categories: list[dict[str, Any]] = Field(default_factory=list)


class NewsItem(WireModel):
    """Feed entry wrapping a news post."""

    type: Literal["news"] = "news"
    id: str
    created_at: str
    news: NewsPayload


class LolMatchEntry(WireModel):
    """A user's share of a competitive match, as recorded at share time."""

    entry_id: str
    match_id: str
    created_at: str
    user_id: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class LolMatchDetail(WireModel):
    """Authoritative per-player statistics row of the sharer."""

    participant: dict[str, Any] | None = None


class RosterPlayer(WireModel):
    """One seat of the normalized ten-player roster."""

    champion_name: str
    champion_id: int
    summoner_name: str
    kills: int
    deaths: int
    assists: int
    kda: float
    role: str
    team: Literal["blue", "red"]


class EnrichedMatchStats(WireModel):
    """Team aggregates and roster computed for a shared match.

    All aggregates are zero and ``all_players`` is ``None`` when the
    authoritative roster is unavailable; a missing roster is omitted from
    the wire form.
    """

    perks: Any = None
    team_total_damage: float = 0.0
    team_total_gold: float = 0.0
    team_total_kills: int = 0
    team_avg_damage_to_champions: float = 0.0
    team_avg_gold_earned: float = 0.0
    team_avg_kill_participation: float = 0.0
    team_avg_vision_score: float = 0.0
    team_avg_cs_per_min: float = 0.0
    team_avg_damage_to_turrets: float = 0.0
    objectives_stolen: int | float = 0
    all_players: list[RosterPlayer] | None = None

    @model_serializer(mode="wrap")
    def _omit_missing_roster(
        self, handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        data: dict[str, Any] = handler(self)
        if self.all_players is None:
            data.pop("allPlayers", None)
            data.pop("all_players", None)
        return data


class LolMatchItem(WireModel):
    """Feed entry wrapping an enriched shared match."""

    type: Literal["lol_match"] = "lol_match"
    id: str
    created_at: str
    entry: LolMatchEntry
    shared_by: FeedAuthor | None = None
    match: LolMatchDetail | None = None
    enriched: EnrichedMatchStats = Field(default_factory=EnrichedMatchStats)


class StatusItem(WireModel):
    """Reserved status entry; never produced by the current sources."""

    type: Literal["status"] = "status"
    id: str
    created_at: str
    status: None = None


FeedItem = Annotated[
    ThreadItem | NewsItem | LolMatchItem | StatusItem,
    Field(discriminator="type"),
]


_ITEM_TYPE_BY_FILTER: dict[FeedFilter, FeedItemType] = {
    FeedFilter.THREADS: FeedItemType.THREAD,
    FeedFilter.NEWS: FeedItemType.NEWS,
    FeedFilter.LOL: FeedItemType.LOL_MATCH,
    FeedFilter.STATUS: FeedItemType.STATUS,
}
