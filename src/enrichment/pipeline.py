"""Match enrichment pipeline.

Turns public match-share rows into ``lol_match`` feed items: four batched
lookups (sharer profiles, match records, stored roster names, sharer
participant rows), then per entry seat disambiguation, team aggregates
and roster normalization.
"""

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import structlog

from src.collectors.errors import ErrorRecord, SourceErrorClass
from src.data_model.items import (
    EnrichedMatchStats,
    FeedAuthor,
    LolMatchDetail,
    LolMatchEntry,
    LolMatchItem,
)
from src.enrichment.aggregates import compute_team_aggregates, select_team
from src.enrichment.metrics import EnrichmentMetrics
from src.enrichment.models import EnrichmentResult, MatchLookups
from src.enrichment.resolver import resolve_participant
from src.enrichment.roster import normalize_roster
from src.store.protocols import FeedDataSource, Row
from src.store.rows import (
    clean_str,
    first_object,
    format_timestamp,
    number_as_is,
    number_or_zero,
    str_or_none,
    timestamp_text,
)


logger = structlog.get_logger()


def entry_metadata(entry: Row) -> dict[str, Any]:
    """Share-time metadata of an entry; non-mappings become empty."""
    metadata = entry.get("metadata")
    return dict(metadata) if isinstance(metadata, Mapping) else {}


def entry_match_id(entry: Row) -> str:
    """Match id of an entry, or "" when missing or not a string."""
    match_id = entry.get("match_id")
    return match_id if isinstance(match_id, str) else ""


def _distinct(values: list[str]) -> list[str]:
    return list(dict.fromkeys(v for v in values if v))


def _duration_seconds(match: Row | None, participant_row: Row | None) -> float:
    """Game duration from the match record, then the participant's match."""
    if match is not None:
        duration = match.get("game_duration")
        if isinstance(duration, int | float) and not isinstance(duration, bool):
            return float(duration)
    if participant_row is not None:
        joined = first_object(participant_row.get("match"))
        if joined is not None:
            return number_or_zero(joined.get("game_duration"))
    return 0.0


class MatchEnrichmentPipeline:
    """Builds enriched match items from match-share rows."""

    def __init__(
        self,
        store: FeedDataSource,
        request_id: str,
        now: datetime | None = None,
        metrics: EnrichmentMetrics | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            store: Read-only store for the batched lookups.
            request_id: Request identifier for logging.
            now: Fallback creation time for rows without one.
            metrics: Optional metrics instance.
        """
        self._store = store
        self._now = now or datetime.now(UTC)
        self._metrics = metrics or EnrichmentMetrics.get_instance()
        self._log = logger.bind(
            component="enrichment",
            subcomponent="pipeline",
            request_id=request_id,
        )

    def enrich(self, entries: list[Row]) -> EnrichmentResult:
        """Look up and build items for a page of match entries.

        Args:
            entries: Match-share rows, newest first.

        Returns:
            EnrichmentResult with items in entry order.
        """
        if not entries:
            return EnrichmentResult(items=[])

        lookups = self.lookup(entries)
        items: list[LolMatchItem] = []
        degraded = 0
        dropped = 0

        for entry in entries:
            item = self.build_item(entry, lookups)
            if item is None:
                dropped += 1
                continue
            if item.enriched.all_players is None:
                degraded += 1
            items.append(item)

        if dropped:
            self._metrics.record_dropped(dropped)

        self._log.debug(
            "matches_enriched",
            entries=len(entries),
            items=len(items),
            degraded=degraded,
            dropped=dropped,
            lookup_errors=len(lookups.errors),
        )
        return EnrichmentResult(
            items=items,
            errors=list(lookups.errors),
            degraded_count=degraded,
            dropped_count=dropped,
        )

    def lookup(self, entries: list[Row]) -> MatchLookups:
        """Run the batched lookups, one store call each.

        Args:
            entries: Match-share rows.

        Returns:
            MatchLookups; a failed lookup contributes nothing.
        """
        lookups = MatchLookups()

        user_ids = _distinct([str_or_none(e.get("user_id")) or "" for e in entries])
        match_ids = _distinct([entry_match_id(e) for e in entries])
        puuids = _distinct(
            [str_or_none(entry_metadata(e).get("puuid")) or "" for e in entries]
        )

        if user_ids:
            for row in self._batched(
                "profiles", lookups, lambda: self._store.fetch_profiles(user_ids)
            ):
                author = self._author_from_profile(row)
                if author is not None:
                    lookups.profiles[author.id] = author

        if match_ids:
            for row in self._batched(
                "matches", lookups, lambda: self._store.fetch_matches(match_ids)
            ):
                match_id = str_or_none(row.get("match_id"))
                if match_id:
                    lookups.matches[match_id] = row

            for row in self._batched(
                "participant_names",
                lookups,
                lambda: self._store.fetch_participant_names(match_ids),
            ):
                match_id = str_or_none(row.get("match_id"))
                puuid = str_or_none(row.get("puuid"))
                name = clean_str(row.get("summoner_name"))
                if match_id and puuid and name:
                    lookups.names.setdefault(match_id, {})[puuid] = name

        if match_ids and puuids:
            for row in self._batched(
                "participants",
                lookups,
                lambda: self._store.fetch_participants(match_ids, puuids),
            ):
                match_id = str_or_none(row.get("match_id"))
                puuid = str_or_none(row.get("puuid"))
                if match_id and puuid:
                    lookups.participants[(match_id, puuid)] = row

        return lookups

    def build_item(self, entry: Row, lookups: MatchLookups) -> LolMatchItem | None:
        """Build one enriched item.

        Args:
            entry: Match-share row.
            lookups: Batched lookup results.

        Returns:
            LolMatchItem, or None when the entry has no match id.
        """
        match_id = entry_match_id(entry)
        if not match_id:
            return None

        metadata = entry_metadata(entry)
        puuid = str_or_none(metadata.get("puuid")) or ""
        participant_row = lookups.participants.get((match_id, puuid))
        match = lookups.matches.get(match_id)

        user_id = str_or_none(entry.get("user_id")) or ""
        raw_id = entry.get("id")
        entry_id = "" if raw_id is None else str(raw_id)
        created_at = timestamp_text(
            entry.get("created_at"), format_timestamp(self._now)
        )

        return LolMatchItem(
            id=f"lol_match-{entry_id}",
            created_at=created_at,
            entry=LolMatchEntry(
                entry_id=entry_id,
                match_id=match_id,
                created_at=created_at,
                user_id=user_id,
                metadata=metadata,
            ),
            shared_by=lookups.profiles.get(user_id) if user_id else None,
            match=(
                LolMatchDetail(participant=participant_row)
                if participant_row is not None
                else None
            ),
            enriched=self._enrich_stats(
                match_id, metadata, match, participant_row, lookups
            ),
        )

    def _enrich_stats(
        self,
        match_id: str,
        metadata: dict[str, Any],
        match: Row | None,
        participant_row: Row | None,
        lookups: MatchLookups,
    ) -> EnrichedMatchStats:
        """Resolve the sharer's seat and compute aggregates and roster."""
        roster = self._roster(match)
        if not roster:
            self._metrics.record_degraded()
            return EnrichedMatchStats()

        resolution = resolve_participant(roster, metadata, participant_row)
        self._metrics.record_resolution(resolution.method.value)
        if not resolution.resolved:
            self._log.debug(
                "participant_unresolved",
                match_id=match_id,
                candidates=resolution.candidates,
            )

        team = select_team(roster, resolution.entry)
        aggregates = compute_team_aggregates(
            team, _duration_seconds(match, participant_row)
        )
        objectives_stolen = metadata.get("objectivesStolen")

        self._metrics.record_enriched()
        return EnrichedMatchStats(
            perks=resolution.entry.get("perks") if resolution.entry else None,
            team_total_damage=aggregates.team_total_damage,
            team_total_gold=aggregates.team_total_gold,
            team_total_kills=aggregates.team_total_kills,
            team_avg_damage_to_champions=aggregates.team_avg_damage_to_champions,
            team_avg_gold_earned=aggregates.team_avg_gold_earned,
            team_avg_kill_participation=aggregates.team_avg_kill_participation,
            team_avg_vision_score=aggregates.team_avg_vision_score,
            team_avg_cs_per_min=aggregates.team_avg_cs_per_min,
            team_avg_damage_to_turrets=aggregates.team_avg_damage_to_turrets,
            objectives_stolen=number_as_is(objectives_stolen),
            all_players=normalize_roster(roster, lookups.names.get(match_id)),
        )

    @staticmethod
    def _roster(match: Row | None) -> list[Mapping[str, Any]]:
        """Roster entries from ``full_json.info.participants``.

        Non-mapping entries keep their seat as an empty mapping.
        """
        if match is None:
            return []
        full_json = match.get("full_json")
        info = full_json.get("info") if isinstance(full_json, Mapping) else None
        participants = info.get("participants") if isinstance(info, Mapping) else None
        if not isinstance(participants, list):
            return []
        return [p if isinstance(p, Mapping) else {} for p in participants]

    @staticmethod
    def _author_from_profile(row: Row) -> FeedAuthor | None:
        raw_id = row.get("id")
        author_id = "" if raw_id is None else str(raw_id)
        if not author_id:
            return None
        return FeedAuthor(
            id=author_id,
            username=str_or_none(row.get("username")),
            public_id=str_or_none(row.get("public_id")),
            avatar_url=str_or_none(row.get("avatar_url")),
            color=str_or_none(row.get("color")),
        )

    def _batched(
        self,
        name: str,
        lookups: MatchLookups,
        call: Callable[[], list[Row]],
    ) -> list[Row]:
        """Run one batched lookup, isolating failures.

        Args:
            name: Lookup name for logging and metrics.
            lookups: Lookup results collecting errors.
            call: Store call.

        Returns:
            Rows, or an empty list when the lookup failed.
        """
        try:
            return list(call())
        except Exception as e:  # noqa: BLE001
            self._metrics.record_lookup_failure(name)
            self._log.warning(
                "enrichment_lookup_failed",
                lookup=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            lookups.errors.append(
                ErrorRecord(
                    error_class=SourceErrorClass.LOOKUP,
                    message=str(e) or type(e).__name__,
                    source_id=name,
                )
            )
            return []
