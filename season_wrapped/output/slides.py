"""Slide variants of a season wrapped recap.

Each slide is a frozen dataclass carrying only the fields its variant
needs; the ``type`` field discriminates variants once serialized.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from season_wrapped.stats.aggregation import (
    LocationRecord,
    OpponentMatchup,
    OpponentRecord,
    PositionRecord,
    TeamRecord,
)
from season_wrapped.stats.archetypes import ArchetypeScore


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


class Slide:
    """Base for slide variants."""

    type: str

    def to_dict(self) -> dict[str, Any]:
        """Convert slide to a JSON-friendly dictionary."""
        return _jsonable(asdict(self))  # type: ignore[call-overload]


@dataclass(frozen=True)
class WelcomeSlide(Slide):
    total_games: int
    type: str = field(default="welcome", init=False)


@dataclass(frozen=True)
class RecordSummarySlide(Slide):
    wins: int
    losses: int
    win_percentage: float
    starting_skill: int
    ending_skill: int
    highest_skill: int
    longest_win_streak: int
    type: str = field(default="record_summary", init=False)


@dataclass(frozen=True)
class TeamBreakdownSlide(Slide):
    teams: list[TeamRecord]
    best_team: TeamRecord
    type: str = field(default="team_breakdown", init=False)


@dataclass(frozen=True)
class BreakdownSlide(Slide):
    """Where and when in the lineup the player does best."""

    best_location: LocationRecord
    worst_location: LocationRecord
    best_position: PositionRecord
    worst_position: PositionRecord
    top_locations: list[LocationRecord]
    bottom_locations: list[LocationRecord]
    type: str = field(default="location_position_breakdown", init=False)


@dataclass(frozen=True)
class RivalsSlide(Slide):
    """Opponents: most played, first and last faced, skill extremes."""

    most_played: list[OpponentRecord]
    season_opener: OpponentMatchup
    season_closer: OpponentMatchup
    lowest_skill_opponents: list[OpponentMatchup]
    highest_skill_opponents: list[OpponentMatchup]
    type: str = field(default="rivals", init=False)


@dataclass(frozen=True)
class ArchetypeSlide(Slide):
    top: list[ArchetypeScore]
    type: str = field(default="archetypes", init=False)


@dataclass(frozen=True)
class SummarySlide(Slide):
    highlights: list[str]
    fun_stat: str
    type: str = field(default="summary", init=False)
