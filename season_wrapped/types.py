"""Type definitions and protocols for season wrapped.

This module defines common types, enums, protocols, and the exception
hierarchy used throughout the application. The provider client is a
protocol so any object exposing the three fetch methods can feed the
pipeline.

Example:
    >>> from season_wrapped.types import ProviderClient
    >>> def load(client: ProviderClient) -> None:
    ...     memberships = client.list_team_seasons("12345")
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol

# =============================================================================
# Type Aliases
# =============================================================================

PlayerId = str
TeamId = str
MatchId = str
SeasonKey = str

RawPayload = dict[str, Any]


# =============================================================================
# Enums
# =============================================================================


class TeamType(str, Enum):
    """League discipline a team plays."""

    EIGHT_BALL = "EIGHT_BALL"
    NINE_BALL = "NINE_BALL"


class TeamSituation(str, Enum):
    """Team score situation at the moment a game began."""

    WINNING = "team_winning"
    LOSING = "team_losing"
    TIED = "team_tied"


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class ProviderClient(Protocol):
    """Protocol for league provider clients.

    Implementations return the provider's raw payloads; the mapping into
    strict entities happens in season_wrapped.data.models.
    """

    def list_team_seasons(self, player_id: PlayerId) -> list[RawPayload]:
        """List a player's team memberships across seasons."""
        ...

    def list_matches_for_team(self, team_external_id: TeamId) -> list[RawPayload]:
        """List a team's played matches (byes and unplayed excluded)."""
        ...

    def get_match_details(self, match_external_id: MatchId) -> RawPayload:
        """Get per-game results for one match."""
        ...


# =============================================================================
# Exceptions
# =============================================================================


class SeasonWrappedError(Exception):
    """Base exception for season wrapped errors."""


class NotFoundError(SeasonWrappedError):
    """No team-seasons match the requested filter."""


class InsufficientDataError(SeasonWrappedError):
    """Not enough games to build a recap.

    Attributes:
        total_games: Games found after normalization.
        required: Minimum number of games required.
    """

    def __init__(self, total_games: int, required: int, context: str = "") -> None:
        self.total_games = total_games
        self.required = required
        suffix = f" in {context}" if context else ""
        super().__init__(
            f"Minimum {required} matches required. "
            f"You played {total_games} matches{suffix}."
        )


class InvalidSeasonFormatError(SeasonWrappedError, ValueError):
    """Season string does not parse as 'Name Year'."""


class PartialIngestFailure(SeasonWrappedError):
    """A single match could not be normalized.

    Recovered per match by the normalizer; it only surfaces to callers
    indirectly, through a reduced game count.

    Attributes:
        match_id: Provider id of the failed match.
    """

    def __init__(self, match_id: MatchId, reason: str) -> None:
        self.match_id = match_id
        self.reason = reason
        super().__init__(f"Match {match_id} could not be normalized: {reason}")
