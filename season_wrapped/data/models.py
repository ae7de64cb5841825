"""Strict entities and the mapping from provider payloads into them.

Entities are frozen dataclasses. Provider payloads are validated by the
models in season_wrapped.data.provider and mapped here, so the normalizer
and aggregators only ever see these shapes.

Example:
    >>> from season_wrapped.data.models import team_season_from_provider
    >>> team = team_season_from_provider(raw_membership)
    >>> print(team.session_key)
    'Fall 2025'
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Iterable

from season_wrapped.data.provider import (
    ProviderMatchDetails,
    ProviderMembership,
    ProviderPlayerScore,
)
from season_wrapped.data.seasons import parse_season_name
from season_wrapped.types import (
    MatchId,
    PlayerId,
    RawPayload,
    SeasonKey,
    TeamId,
    TeamSituation,
    TeamType,
)

# =============================================================================
# Constants
# =============================================================================

# Skill level assumed when the provider reports 0 or nothing
DEFAULT_SKILL_LEVEL: int = 3

UNKNOWN_NAME: str = "Unknown"

# Namespace for deterministic team-season ids
TEAM_SEASON_NAMESPACE = uuid.UUID("6f1c1d9e-4b0a-5c55-9a63-2f8f1c7e0b4d")

EIGHT_BALL_TYPENAME: str = "EightBallPlayer"


# =============================================================================
# Entities
# =============================================================================


@dataclass(frozen=True)
class TeamSeason:
    """A player's participation in one league season on one team.

    Attributes:
        id: Stable identifier (UUID5 of the provider team id).
        external_id: Provider team id.
        name: Team name.
        type: Team discipline.
        season: Season name, e.g. "Fall".
        season_year: Season year, e.g. 2025.
        match_ids: Provider ids of the team's played matches.
    """

    id: TeamId
    external_id: TeamId
    name: str
    type: TeamType
    season: str
    season_year: int
    match_ids: tuple[MatchId, ...] = ()

    @property
    def session_key(self) -> SeasonKey:
        """Season label, e.g. 'Fall 2025'."""
        return f"{self.season} {self.season_year}"

    def with_match_ids(self, match_ids: Iterable[MatchId]) -> TeamSeason:
        """Return a copy carrying the fetched match ids."""
        return replace(self, match_ids=tuple(match_ids))


@dataclass(frozen=True)
class Match:
    """One team-vs-team event."""

    id: MatchId
    date: datetime
    location: str
    home_team_id: TeamId
    away_team_id: TeamId
    home_team_score: int
    away_team_score: int
    game_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class PlayerGameStats:
    """One side of one game within a match."""

    player_id: PlayerId | None
    name: str | None
    skill_level: int
    score: int
    innings: int
    defensive_shots: int
    games_won: int


@dataclass(frozen=True)
class GamePairing:
    """A single game of a match: the home and away player lines.

    Attributes:
        id: Provider id of the home score row.
        position: Order of the game within the match (1..5).
        match_id: Provider id of the match.
        home: Home player's line.
        away: Away player's line.
    """

    id: str | None
    position: int
    match_id: MatchId
    home: PlayerGameStats
    away: PlayerGameStats


@dataclass(frozen=True)
class PlayerGameRecord:
    """Outcome of one game, attributed to the tracked player.

    Attributes:
        match_id: Provider id of the match the game belongs to.
        date: Match date.
        is_win: Whether the tracked player won (ties count as losses).
        player_skill: Tracked player's skill level.
        opponent_skill: Opponent's skill level.
        skill_difference: player_skill - opponent_skill.
        position: Order of the game within the match.
        location: Match location name.
        team_situation: Team score situation before the game.
        is_home: Whether the tracked player played for the home team.
        player_score: Tracked player's game score.
        opponent_score: Opponent's game score.
        opponent_name: Opponent display name.
        team_id: Normalized team-season id.
        team_name: Team name.
        team_type: Team discipline.
        season_key: Season label, e.g. 'Fall 2025'.
        innings: Innings the tracked player played.
        defensive_shots: Defensive shots the tracked player took.
    """

    match_id: MatchId
    date: datetime
    is_win: bool
    player_skill: int
    opponent_skill: int
    skill_difference: int
    position: int
    location: str
    team_situation: TeamSituation
    is_home: bool
    player_score: int
    opponent_score: int
    opponent_name: str
    team_id: TeamId
    team_name: str
    team_type: TeamType
    season_key: SeasonKey
    innings: int = 0
    defensive_shots: int = 0

    @property
    def score_key(self) -> str:
        """Score pair from the player's side, e.g. '2-1'."""
        return f"{self.player_score}-{self.opponent_score}"


# =============================================================================
# Mapping Functions
# =============================================================================


def team_season_id(external_id: TeamId) -> TeamId:
    """Deterministic team-season id for a provider team id."""
    return str(uuid.uuid5(TEAM_SEASON_NAMESPACE, f"team:{external_id}"))


def team_season_from_provider(raw: RawPayload | ProviderMembership) -> TeamSeason:
    """Map a provider team membership into a TeamSeason.

    Args:
        raw: Membership payload (raw dict or validated model).

    Returns:
        TeamSeason with an empty match id list.

    Raises:
        pydantic.ValidationError: If the payload lacks required fields.
        InvalidSeasonFormatError: If the session name is not 'Name Year'.
    """
    membership = _as_membership(raw)
    team = membership.team
    external_id = (team.id if team else None) or ""
    season, season_year = parse_season_name(membership.session.name or "")

    return TeamSeason(
        id=team_season_id(external_id),
        external_id=external_id,
        name=(team.name if team else None) or "",
        type=(
            TeamType.EIGHT_BALL
            if membership.typename == EIGHT_BALL_TYPENAME
            else TeamType.NINE_BALL
        ),
        season=season,
        season_year=season_year,
    )


def player_ids_by_team(
    memberships: Iterable[RawPayload | ProviderMembership],
    teams: Iterable[TeamSeason],
) -> dict[TeamId, PlayerId]:
    """Map normalized team ids to the tracked player's id on that team.

    Memberships for teams not in ``teams`` are ignored.
    """
    team_by_external = {team.external_id: team.id for team in teams}
    mapping: dict[TeamId, PlayerId] = {}
    for raw in memberships:
        membership = _as_membership(raw)
        external_id = membership.team.id if membership.team else None
        if external_id is None or external_id not in team_by_external:
            continue
        mapping[team_by_external[external_id]] = membership.id
    return mapping


def match_from_provider(details: ProviderMatchDetails) -> Match:
    """Map validated match details into a Match."""
    home = details.result_for("HOME")
    away = details.result_for("AWAY")

    return Match(
        id=details.id,
        date=details.start_time,
        location=(details.location.name if details.location else None)
        or UNKNOWN_NAME,
        home_team_id=details.home.id or "",
        away_team_id=details.away.id or "",
        home_team_score=_points_total(home),
        away_team_score=_points_total(away),
        game_ids=tuple(
            score.id for score in (home.scores if home else []) if score.id
        ),
    )


def pairings_from_provider(
    details: ProviderMatchDetails,
    team_type: TeamType = TeamType.EIGHT_BALL,
) -> list[GamePairing]:
    """Pair home and away score rows by match position.

    Args:
        details: Validated match details.
        team_type: Discipline deciding which points field is the game score.

    Returns:
        Pairings sorted by position; empty when the match has no home scores.

    Raises:
        ValueError: If a home row has no away row at the same position.
    """
    home = details.result_for("HOME")
    away = details.result_for("AWAY")
    if home is None or not home.scores:
        return []

    away_by_position = {
        score.match_position_number: score for score in (away.scores if away else [])
    }

    pairings: list[GamePairing] = []
    for home_score in home.scores:
        position = home_score.match_position_number
        away_score = away_by_position.get(position)
        if away_score is None:
            raise ValueError(f"No away score at position {position}")

        pairings.append(
            GamePairing(
                id=home_score.id,
                position=position,
                match_id=details.id,
                home=_player_stats(home_score, team_type),
                away=_player_stats(away_score, team_type),
            )
        )

    return sorted(pairings, key=lambda p: p.position)


def _as_membership(raw: RawPayload | ProviderMembership) -> ProviderMembership:
    if isinstance(raw, ProviderMembership):
        return raw
    return ProviderMembership.model_validate(raw)


def _points_total(result: Any) -> int:
    if result is None or result.points is None:
        return 0
    return result.points.total or 0


def _player_stats(score: ProviderPlayerScore, team_type: TeamType) -> PlayerGameStats:
    if team_type is TeamType.NINE_BALL:
        points = score.nine_ball_match_points_earned
    else:
        points = score.eight_ball_match_points_earned

    return PlayerGameStats(
        player_id=score.player.id if score.player else None,
        name=score.player.display_name if score.player else None,
        skill_level=score.skill_level or DEFAULT_SKILL_LEVEL,
        score=points or 0,
        innings=score.innings or 0,
        defensive_shots=score.defensive_shots or 0,
        games_won=score.eight_ball_wins or 0,
    )
