"""Normalization of the authoritative ten-player roster."""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from src.data_model.items import RosterPlayer
from src.enrichment.constants import (
    BLUE_TEAM_ID,
    PLACEHOLDER_PLAYER_NAME,
    ROLE_FIELDS,
    UNKNOWN_CHAMPION,
)
from src.store.rows import clean_str, int_or_default


class Role(str, Enum):
    """Normalized lane role."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MID = "MID"
    BOT = "BOT"
    SUP = "SUP"
    UNKNOWN = "Unknown"


_ROLE_TOKENS: dict[str, Role] = {
    "TOP": Role.TOP,
    "JUNGLE": Role.JUNGLE,
    "JG": Role.JUNGLE,
    "JUN": Role.JUNGLE,
    "MID": Role.MID,
    "MIDDLE": Role.MID,
    "BOT": Role.BOT,
    "BOTTOM": Role.BOT,
    "ADC": Role.BOT,
    "CARRY": Role.BOT,
    "DUO_CARRY": Role.BOT,
    "SUP": Role.SUP,
    "SUPP": Role.SUP,
    "SUPPORT": Role.SUP,
    "UTILITY": Role.SUP,
    "DUO_SUPPORT": Role.SUP,
}


def normalize_role_token(value: Any) -> Role | None:
    """Map a raw position token to a role, case-insensitively."""
    if not isinstance(value, str):
        return None
    return _ROLE_TOKENS.get(value.strip().upper())


def participant_role(participant: Mapping[str, Any]) -> Role:
    """Derive a roster entry's role from its position fields.

    Args:
        participant: Roster entry.

    Returns:
        First recognized role among teamPosition, individualPosition, lane
        and role, else Role.UNKNOWN.
    """
    for name in ROLE_FIELDS:
        role = normalize_role_token(participant.get(name))
        if role is not None:
            return role
    return Role.UNKNOWN


def participant_display_name(participant: Mapping[str, Any]) -> str | None:
    """Derive a display name from a roster entry.

    Riot ID ``game#tag`` wins, then the bare game name, then the legacy
    summoner name.

    Args:
        participant: Roster entry.

    Returns:
        Display name, or None when the entry carries no usable name.
    """
    game_name = clean_str(participant.get("riotIdGameName"))
    tagline = clean_str(participant.get("riotIdTagline"))
    summoner_name = clean_str(participant.get("summonerName"))

    if game_name and tagline:
        return f"{game_name}#{tagline}"
    if game_name:
        return game_name
    return summoner_name


def compute_kda(kills: int, deaths: int, assists: int) -> float:
    """KDA ratio; a deathless game counts kills plus assists."""
    if deaths > 0:
        return (kills + assists) / deaths
    return float(kills + assists)


def normalize_roster(
    participants: list[Mapping[str, Any]],
    fallback_names: Mapping[str, str] | None = None,
) -> list[RosterPlayer]:
    """Normalize every roster entry for display.

    Args:
        participants: Roster entries from the match record.
        fallback_names: Stored summoner names by puuid for this match.

    Returns:
        One RosterPlayer per entry, in roster order.
    """
    fallback_names = fallback_names or {}
    players: list[RosterPlayer] = []

    for p in participants:
        champion_name = p.get("championName")
        kills = int_or_default(p.get("kills"))
        deaths = int_or_default(p.get("deaths"))
        assists = int_or_default(p.get("assists"))

        puuid = clean_str(p.get("puuid"))
        display_name = (
            participant_display_name(p)
            or (fallback_names.get(puuid) if puuid else None)
            or PLACEHOLDER_PLAYER_NAME
        )

        players.append(
            RosterPlayer(
                champion_name=(
                    champion_name
                    if isinstance(champion_name, str)
                    else UNKNOWN_CHAMPION
                ),
                champion_id=int_or_default(p.get("championId")),
                summoner_name=display_name,
                kills=kills,
                deaths=deaths,
                assists=assists,
                kda=compute_kda(kills, deaths, assists),
                role=participant_role(p).value,
                team="blue" if p.get("teamId") == BLUE_TEAM_ID else "red",
            )
        )

    return players
