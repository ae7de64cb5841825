"""Data layer for season wrapped.

This module covers everything between the league provider's payloads and
the per-game records the statistics run on.

Submodules:
    provider: Boundary models for provider payloads and a file-backed client
    models: Strict entities and the mapping from provider payloads
    seasons: Season parsing, ordering and selection
    normalizer: Per-match team-situation reconstruction

Example:
    >>> from season_wrapped.data import JsonProviderClient, team_season_from_provider
    >>> client = JsonProviderClient("data/provider")
    >>> teams = [team_season_from_provider(m) for m in client.list_team_seasons("12345")]
"""
from __future__ import annotations

from season_wrapped.data.models import (
    DEFAULT_SKILL_LEVEL,
    UNKNOWN_NAME,
    GamePairing,
    Match,
    PlayerGameRecord,
    PlayerGameStats,
    TeamSeason,
    match_from_provider,
    pairings_from_provider,
    player_ids_by_team,
    team_season_from_provider,
    team_season_id,
)
from season_wrapped.data.normalizer import (
    IngestResult,
    MatchStreamNormalizer,
    NormalizedMatch,
    RunningScore,
    reconstruct_game_records,
)
from season_wrapped.data.provider import (
    JsonProviderClient,
    ProviderMatchDetails,
    ProviderMembership,
    ProviderScheduledMatch,
)
from season_wrapped.data.seasons import (
    SeasonPredicate,
    default_predicate,
    parse_season_name,
    season_predicate,
    select_team_seasons,
    sort_team_seasons,
    year_predicate,
)

__all__: list[str] = [
    # Provider
    "JsonProviderClient",
    "ProviderMatchDetails",
    "ProviderMembership",
    "ProviderScheduledMatch",
    # Entities
    "DEFAULT_SKILL_LEVEL",
    "UNKNOWN_NAME",
    "GamePairing",
    "Match",
    "PlayerGameRecord",
    "PlayerGameStats",
    "TeamSeason",
    "match_from_provider",
    "pairings_from_provider",
    "player_ids_by_team",
    "team_season_from_provider",
    "team_season_id",
    # Seasons
    "SeasonPredicate",
    "default_predicate",
    "parse_season_name",
    "season_predicate",
    "select_team_seasons",
    "sort_team_seasons",
    "year_predicate",
    # Normalizer
    "IngestResult",
    "MatchStreamNormalizer",
    "NormalizedMatch",
    "RunningScore",
    "reconstruct_game_records",
]
