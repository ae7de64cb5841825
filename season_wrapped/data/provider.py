"""Boundary models and a file-backed client for league provider payloads.

The league provider answers with loosely-typed GraphQL documents. This module
validates them into pydantic models the moment they are ingested, so nothing
downstream ever touches a raw provider dict. The JsonProviderClient serves
exported payloads from disk and satisfies the ProviderClient protocol.

Example:
    >>> from season_wrapped.data.provider import JsonProviderClient
    >>> client = JsonProviderClient("data/provider")
    >>> memberships = client.list_team_seasons("12345")
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from season_wrapped.logging import get_logger
from season_wrapped.types import MatchId, PlayerId, RawPayload, TeamId

logger = get_logger(__name__)

# Schedule statuses the provider uses for matches that never happened
UNPLAYED_STATUS: str = "UNPLAYED"


def _id_to_str(value: Any) -> Any:
    """Provider ids arrive as either ints or strings."""
    if value is None or isinstance(value, str):
        return value
    return str(value)


ProviderIdStr = Annotated[str, BeforeValidator(_id_to_str)]


# =============================================================================
# Payload Models
# =============================================================================


class ProviderModel(BaseModel):
    """Base for provider payload models (camelCase aliases, extras ignored)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ProviderRef(ProviderModel):
    """Id/name reference to a team, location or session."""

    id: ProviderIdStr | None = None
    name: str | None = None


class ProviderMembership(ProviderModel):
    """A player's roster entry on one team for one session.

    The membership's own ``id`` is the player's id within that team; score
    rows on match details reference the player by this id.
    """

    id: ProviderIdStr
    typename: str | None = Field(default=None, alias="__typename")
    nick_name: str | None = Field(default=None, alias="nickName")
    skill_level: int | None = Field(default=None, alias="skillLevel")
    session: ProviderRef
    team: ProviderRef | None = None


class ProviderScheduledMatch(ProviderModel):
    """One entry of a team schedule."""

    id: ProviderIdStr | None = None
    status: str | None = None
    is_bye: bool = Field(default=False, alias="isBye")
    start_time: str | None = Field(default=None, alias="startTime")

    @property
    def is_played(self) -> bool:
        """Whether the entry is a real, played match."""
        return self.id is not None and not self.is_bye and self.status != UNPLAYED_STATUS


class ProviderPlayerRef(ProviderModel):
    """Player reference on a score row."""

    id: ProviderIdStr | None = None
    display_name: str | None = Field(default=None, alias="displayName")


class ProviderPlayerScore(ProviderModel):
    """One player's line for one game of a match."""

    id: ProviderIdStr | None = None
    player: ProviderPlayerRef | None = None
    match_position_number: int = Field(alias="matchPositionNumber")
    skill_level: int | None = Field(default=None, alias="skillLevel")
    innings: int | None = None
    defensive_shots: int | None = Field(default=None, alias="defensiveShots")
    eight_ball_wins: int | None = Field(default=None, alias="eightBallWins")
    eight_ball_match_points_earned: int | None = Field(
        default=None, alias="eightBallMatchPointsEarned"
    )
    nine_ball_match_points_earned: int | None = Field(
        default=None, alias="nineBallMatchPointsEarned"
    )


class ProviderPoints(ProviderModel):
    """Team points for a match."""

    total: int | None = None


class ProviderMatchResult(ProviderModel):
    """One side's results for a match."""

    home_away: str = Field(alias="homeAway")
    points: ProviderPoints | None = None
    scores: list[ProviderPlayerScore] = Field(default_factory=list)


class ProviderMatchDetails(ProviderModel):
    """Detailed per-game results for one match."""

    id: ProviderIdStr
    start_time: datetime = Field(alias="startTime")
    location: ProviderRef | None = None
    home: ProviderRef
    away: ProviderRef
    results: list[ProviderMatchResult] = Field(default_factory=list)

    @field_validator("start_time")
    @classmethod
    def start_time_as_utc(cls, v: datetime) -> datetime:
        """Store start times in UTC; values without an offset are taken as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    def result_for(self, side: str) -> ProviderMatchResult | None:
        """Return the results block for 'HOME' or 'AWAY', if present."""
        for result in self.results:
            if result.home_away == side:
                return result
        return None


# =============================================================================
# File-backed Client
# =============================================================================


class JsonProviderClient:
    """Provider client over a directory of exported payloads.

    Layout:
        teams/<player_id>.json       list of memberships
        schedules/<team_id>.json     list of scheduled matches
        matches/<match_id>.json      match details

    Byes and unplayed matches are dropped from schedules, matching what the
    live provider client hands back.

    Attributes:
        data_dir: Root directory of the export.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)
        logger.debug("JsonProviderClient initialized: data_dir={}", self.data_dir)

    def _read(self, *parts: str) -> Any:
        path = self.data_dir.joinpath(*parts)
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)

    def list_team_seasons(self, player_id: PlayerId) -> list[RawPayload]:
        """List a player's team memberships; empty when the player is unknown."""
        try:
            payload = self._read("teams", f"{player_id}.json")
        except FileNotFoundError:
            logger.warning("No team memberships exported for player {}", player_id)
            return []
        return list(payload)

    def list_matches_for_team(self, team_external_id: TeamId) -> list[RawPayload]:
        """List a team's played matches, dropping byes and unplayed entries."""
        try:
            payload = self._read("schedules", f"{team_external_id}.json")
        except FileNotFoundError:
            logger.warning("No schedule exported for team {}", team_external_id)
            return []

        played = [
            raw
            for raw in payload
            if ProviderScheduledMatch.model_validate(raw).is_played
        ]
        logger.debug(
            "Team {}: {} of {} scheduled matches played",
            team_external_id,
            len(played),
            len(payload),
        )
        return played

    def get_match_details(self, match_external_id: MatchId) -> RawPayload:
        """Get match details.

        Raises:
            FileNotFoundError: If the match was never exported.
        """
        return self._read("matches", f"{match_external_id}.json")
