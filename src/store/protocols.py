"""Read-only contract for the stores the feed aggregates."""

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import Field

from src.data_model.base import StrictBaseModel


Row = dict[str, Any]


class SourceQuery(StrictBaseModel):
    """Bounded, ordered range query against one content store.

    Results are ordered by the store's natural timestamp, newest first.

    Attributes:
        offset: Number of leading rows to skip.
        limit: Maximum number of rows to return.
        before: Exclusive upper bound on the timestamp (watermark).
        since: Inclusive lower bound on the timestamp (look-back window).
    """

    offset: int = Field(default=0, ge=0)
    limit: int = Field(ge=0)
    before: datetime | None = None
    since: datetime | None = None


@runtime_checkable
class FeedDataSource(Protocol):
    """Query interface over threads, news, match shares and match data.

    Implementations apply the store-level visibility filters themselves:
    threads exclude soft-deleted rows, news only includes published posts,
    and match shares only include public, non-deleted ``lol_match``
    entries. Joined sub-objects (author, category) may come back either
    as an object or as a one-element list.
    """

    def fetch_threads(self, query: SourceQuery) -> list[Row]:
        """Fetch thread rows ordered by ``created_at`` descending."""
        ...

    def fetch_news(self, query: SourceQuery) -> list[Row]:
        """Fetch published news rows ordered by ``published_at`` descending."""
        ...

    def fetch_match_entries(self, query: SourceQuery) -> list[Row]:
        """Fetch public match-share rows ordered by ``created_at`` descending."""
        ...

    def fetch_profiles(self, user_ids: Sequence[str]) -> list[Row]:
        """Batch lookup of profiles by id."""
        ...

    def fetch_matches(self, match_ids: Sequence[str]) -> list[Row]:
        """Batch lookup of authoritative match records by match id."""
        ...

    def fetch_participant_names(self, match_ids: Sequence[str]) -> list[Row]:
        """Batch lookup of (match_id, puuid, summoner_name) rows."""
        ...

    def fetch_participants(
        self, match_ids: Sequence[str], puuids: Sequence[str]
    ) -> list[Row]:
        """Batch lookup of full participant rows for match ids x puuids."""
        ...
