"""Team aggregates for the sharer's side of a match."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from src.enrichment.constants import (
    DEFAULT_TEAM_SIZE,
    MIN_GAME_MINUTES,
    SECONDS_PER_MINUTE,
)
from src.store.rows import int_or_default, number_or_zero


@dataclass(frozen=True)
class TeamAggregates:
    """Totals and per-player averages over one team.

    Kill participation is a fraction in [0, 1] per player, averaged.
    """

    team_total_damage: float = 0.0
    team_total_gold: float = 0.0
    team_total_kills: int = 0
    team_avg_damage_to_champions: float = 0.0
    team_avg_gold_earned: float = 0.0
    team_avg_kill_participation: float = 0.0
    team_avg_vision_score: float = 0.0
    team_avg_cs_per_min: float = 0.0
    team_avg_damage_to_turrets: float = 0.0


def select_team(
    roster: Sequence[Mapping[str, Any]],
    resolved: Mapping[str, Any] | None,
) -> list[Mapping[str, Any]]:
    """Roster entries sharing the resolved entry's teamId.

    With no resolved entry the team id is missing, which selects entries
    whose teamId is also missing.
    """
    team_id = resolved.get("teamId") if resolved is not None else None
    return [p for p in roster if p.get("teamId") == team_id]


def game_minutes(duration_seconds: float) -> float:
    """Game length in minutes, floored at one minute."""
    return max(MIN_GAME_MINUTES, duration_seconds / SECONDS_PER_MINUTE)


def compute_team_aggregates(
    team: Sequence[Mapping[str, Any]],
    duration_seconds: float,
) -> TeamAggregates:
    """Compute team totals and averages.

    Averages divide by the team size, or by DEFAULT_TEAM_SIZE when the
    team is empty.

    Args:
        team: Roster entries of one team.
        duration_seconds: Game duration in seconds (0 when unknown).

    Returns:
        TeamAggregates for the team.
    """
    team_size = len(team) if team else DEFAULT_TEAM_SIZE
    minutes = game_minutes(duration_seconds)

    total_damage = sum(
        number_or_zero(p.get("totalDamageDealtToChampions")) for p in team
    )
    total_gold = sum(number_or_zero(p.get("goldEarned")) for p in team)
    total_kills = sum(int_or_default(p.get("kills")) for p in team)

    kill_participation = 0.0
    if total_kills > 0:
        kill_participation = (
            sum(
                (int_or_default(p.get("kills")) + int_or_default(p.get("assists")))
                / total_kills
                for p in team
            )
            / team_size
        )

    vision = sum(number_or_zero(p.get("visionScore")) for p in team)
    cs_per_min = sum(
        (
            number_or_zero(p.get("totalMinionsKilled"))
            + number_or_zero(p.get("neutralMinionsKilled"))
        )
        / minutes
        for p in team
    )
    turrets = sum(number_or_zero(p.get("damageDealtToTurrets")) for p in team)

    return TeamAggregates(
        team_total_damage=total_damage,
        team_total_gold=total_gold,
        team_total_kills=total_kills,
        team_avg_damage_to_champions=total_damage / team_size,
        team_avg_gold_earned=total_gold / team_size,
        team_avg_kill_participation=kill_participation,
        team_avg_vision_score=vision / team_size,
        team_avg_cs_per_min=cs_per_min / team_size,
        team_avg_damage_to_turrets=turrets / team_size,
    )
