"""Disambiguation of the sharer's seat in the authoritative roster.

Share-time metadata may be incomplete or stale, so the seat is resolved
through an ordered chain:

1. exact puuid match;
2. champion id + kills + deaths + assists, tie-broken by display name,
   else the first candidate;
3. champion id alone, only when exactly one seat played it.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.enrichment.roster import participant_display_name
from src.store.rows import clean_str, str_or_none


class ResolutionMethod(str, Enum):
    """How the sharer's roster entry was found."""

    PUUID = "puuid"
    CHAMPION_KDA = "champion_kda"
    CHAMPION_KDA_NAME = "champion_kda_name"
    CHAMPION_KDA_FIRST = "champion_kda_first"
    CHAMPION_ONLY = "champion_only"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class ParticipantResolution:
    """Outcome of roster disambiguation.

    Attributes:
        entry: Resolved roster entry, or None.
        method: Branch of the chain that resolved it.
        candidates: Candidates considered by the resolving branch.
    """

    entry: Mapping[str, Any] | None
    method: ResolutionMethod
    candidates: int = 0

    @property
    def resolved(self) -> bool:
        """Check if a roster entry was found."""
        return self.entry is not None


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    return None


def _champion_id(value: Any) -> float | None:
    """Champion id from metadata; numeric strings are accepted."""
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
    else:
        parsed = _number(value)
    if parsed is None or not math.isfinite(parsed):
        return None
    return parsed


def _stat(
    name: str,
    metadata: Mapping[str, Any],
    participant_row: Mapping[str, Any] | None,
) -> float | None:
    value = _number(metadata.get(name))
    if value is None and participant_row is not None:
        value = _number(participant_row.get(name))
    return value


def _matches_champion(entry: Mapping[str, Any], champion_id: float) -> bool:
    return _number(entry.get("championId")) == champion_id


def _matches_name(entry: Mapping[str, Any], name: str) -> bool:
    wanted = name.lower()
    names = (participant_display_name(entry), str_or_none(entry.get("summonerName")))
    for candidate in names:
        if candidate is not None and candidate.lower() == wanted:
            return True
    return False


def resolve_participant(
    roster: Sequence[Mapping[str, Any]],
    metadata: Mapping[str, Any],
    participant_row: Mapping[str, Any] | None = None,
) -> ParticipantResolution:
    """Find the sharer's entry in the roster.

    Args:
        roster: Roster entries from the match record.
        metadata: Share-time metadata of the match entry.
        participant_row: Authoritative per-player row of the sharer, if any.

    Returns:
        ParticipantResolution; ``entry`` is None when nothing matched.
    """
    puuid = clean_str(metadata.get("puuid"))
    if puuid:
        for entry in roster:
            if entry.get("puuid") == puuid:
                return ParticipantResolution(entry, ResolutionMethod.PUUID, 1)

    champion_id = _champion_id(metadata.get("championId"))
    if champion_id is None:
        return ParticipantResolution(None, ResolutionMethod.UNRESOLVED)

    kills = _stat("kills", metadata, participant_row)
    deaths = _stat("deaths", metadata, participant_row)
    assists = _stat("assists", metadata, participant_row)

    if kills is not None and deaths is not None and assists is not None:
        candidates = [
            entry
            for entry in roster
            if _matches_champion(entry, champion_id)
            and _number(entry.get("kills")) == kills
            and _number(entry.get("deaths")) == deaths
            and _number(entry.get("assists")) == assists
        ]
        if len(candidates) == 1:
            return ParticipantResolution(
                candidates[0], ResolutionMethod.CHAMPION_KDA, 1
            )
        if candidates:
            name = None
            if participant_row is not None:
                name = str_or_none(participant_row.get("summoner_name"))
            name = name or str_or_none(metadata.get("summonerName"))
            if name:
                for entry in candidates:
                    if _matches_name(entry, name):
                        return ParticipantResolution(
                            entry, ResolutionMethod.CHAMPION_KDA_NAME, len(candidates)
                        )
            return ParticipantResolution(
                candidates[0], ResolutionMethod.CHAMPION_KDA_FIRST, len(candidates)
            )

    champion_seats = [e for e in roster if _matches_champion(e, champion_id)]
    if len(champion_seats) == 1:
        return ParticipantResolution(
            champion_seats[0], ResolutionMethod.CHAMPION_ONLY, 1
        )
    return ParticipantResolution(
        None, ResolutionMethod.UNRESOLVED, len(champion_seats)
    )
