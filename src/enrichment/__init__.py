"""Match enrichment: seat disambiguation, team aggregates and roster."""

from src.enrichment.aggregates import (
    TeamAggregates,
    compute_team_aggregates,
    game_minutes,
    select_team,
)
from src.enrichment.metrics import EnrichmentMetrics
from src.enrichment.models import EnrichmentResult, MatchLookups
from src.enrichment.pipeline import MatchEnrichmentPipeline
from src.enrichment.resolver import (
    ParticipantResolution,
    ResolutionMethod,
    resolve_participant,
)
from src.enrichment.roster import (
    Role,
    compute_kda,
    normalize_role_token,
    normalize_roster,
    participant_display_name,
    participant_role,
)


__all__ = [
    "EnrichmentMetrics",
    "EnrichmentResult",
    "MatchEnrichmentPipeline",
    "MatchLookups",
    "ParticipantResolution",
    "ResolutionMethod",
    "Role",
    "TeamAggregates",
    "compute_kda",
    "compute_team_aggregates",
    "game_minutes",
    "normalize_role_token",
    "normalize_roster",
    "participant_display_name",
    "participant_role",
    "resolve_participant",
    "select_team",
]
