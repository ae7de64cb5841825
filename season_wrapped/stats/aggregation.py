"""Aggregation of per-game records into statistical buckets.

Every dimension is an independent fold over the same record list: each
record lands in exactly one (wins, losses) bucket per dimension, so a
dimension's bucket totals always sum to the number of records. Win
percentages are derived from the counts, never stored as ground truth.

Ordering-sensitive statistics (win streaks, skill progression) expect the
records sorted by date; use sort_by_date first.

Example:
    >>> from season_wrapped.stats.aggregation import aggregate_records
    >>> dimensions = aggregate_records(records)
    >>> print(dimensions["by_location"]["Corner Pocket"].win_percentage)
    66.7
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Iterable, Sequence, TypeVar

import pandas as pd

from season_wrapped.data.models import DEFAULT_SKILL_LEVEL
from season_wrapped.logging import get_logger
from season_wrapped.types import SeasonKey, TeamId, TeamType

if TYPE_CHECKING:
    from season_wrapped.data.models import PlayerGameRecord, TeamSeason

logger = get_logger(__name__)

# =============================================================================
# Constants
# =============================================================================

# Upper bound (inclusive) and label of each innings bucket
INNINGS_BUCKETS: list[tuple[int, str]] = [
    (10, "0-10"),
    (20, "11-20"),
    (30, "21-30"),
]
INNINGS_OVERFLOW_BUCKET: str = "30+"

DEFAULT_TOP_N: int = 3

# Report dimension -> frame column holding its key
DIMENSIONS: dict[str, str] = {
    "by_team": "team_id",
    "by_session": "season_key",
    "head_to_head": "opponent_name",
    "by_position": "position",
    "by_location": "location",
    "score_distribution": "score_key",
    "by_skill_difference": "skill_difference",
    "by_opponent_skill": "opponent_skill",
    "by_my_skill": "player_skill",
    "by_innings": "innings_bucket",
    "by_team_situation": "team_situation",
}

FRAME_COLUMNS: list[str] = [*DIMENSIONS.values(), "is_win"]


# =============================================================================
# Percentages
# =============================================================================


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for non-negative values.

    Example:
        >>> round_half_up(12.25, 1)
        12.3
    """
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def win_percentage(wins: int, total: int) -> float:
    """Win percentage to one decimal; 0.0 when there are no games."""
    if total <= 0:
        return 0.0
    return round_half_up(wins / total * 100, 1)


def format_percentage(value: float) -> str:
    """Render a percentage without a trailing '.0'."""
    return f"{value:g}" if value == int(value) else f"{value:.1f}"


def innings_bucket(innings: int) -> str:
    """Bucket label for the number of innings played."""
    for upper, label in INNINGS_BUCKETS:
        if innings <= upper:
            return label
    return INNINGS_OVERFLOW_BUCKET


# =============================================================================
# Buckets
# =============================================================================


@dataclass(frozen=True)
class Bucket:
    """Wins and losses for one key of one dimension."""

    wins: int = 0
    losses: int = 0

    @property
    def total(self) -> int:
        return self.wins + self.losses

    @property
    def win_percentage(self) -> float:
        return win_percentage(self.wins, self.total)

    def to_dict(self) -> dict[str, int | float]:
        return {
            "wins": self.wins,
            "losses": self.losses,
            "win_percentage": self.win_percentage,
        }


def records_to_frame(records: Iterable[PlayerGameRecord]) -> pd.DataFrame:
    """Flatten records into one row per game with a column per dimension."""
    rows = [
        {
            "team_id": r.team_id,
            "season_key": r.season_key,
            "opponent_name": r.opponent_name,
            "position": r.position,
            "location": r.location,
            "score_key": r.score_key,
            "skill_difference": r.skill_difference,
            "opponent_skill": r.opponent_skill,
            "player_skill": r.player_skill,
            "innings_bucket": innings_bucket(r.innings),
            "team_situation": r.team_situation.value,
            "is_win": r.is_win,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def aggregate_dimension(frame: pd.DataFrame, column: str) -> dict[Any, Bucket]:
    """Fold the frame into buckets keyed by one column.

    Keys keep the order in which they first appear.
    """
    if frame.empty:
        return {}

    grouped = frame.groupby(column, sort=False)["is_win"].agg(
        wins="sum", games="count"
    )
    return {
        _plain(key): Bucket(wins=int(wins), losses=int(games - wins))
        for key, wins, games in zip(grouped.index, grouped["wins"], grouped["games"])
    }


def aggregate_records(
    records: Sequence[PlayerGameRecord],
) -> dict[str, dict[Any, Bucket]]:
    """Aggregate records along every report dimension.

    Returns:
        Mapping of dimension name (see DIMENSIONS) to its buckets.
    """
    frame = records_to_frame(records)
    return {name: aggregate_dimension(frame, column) for name, column in DIMENSIONS.items()}


def _plain(key: Any) -> Any:
    # numpy scalars -> Python scalars
    return key.item() if hasattr(key, "item") else key


# =============================================================================
# Season Report
# =============================================================================


@dataclass
class SeasonReport:
    """Full multi-dimensional aggregate of a player's games.

    Attributes:
        overall_wins: Games won.
        overall_losses: Games lost.
        by_team: Buckets per team-season id.
        by_session: Buckets per 'Season Year'.
        head_to_head: Buckets per opponent name.
        by_position: Buckets per match position.
        by_location: Buckets per location.
        score_distribution: Buckets per score pair, e.g. '2-1'.
        by_skill_difference: Buckets per player - opponent skill.
        by_opponent_skill: Buckets per opponent skill.
        by_my_skill: Buckets per player skill.
        by_innings: Buckets per innings range.
        by_team_situation: Buckets per team situation.
        total_matches: Games counted.
        total_teams: Team-seasons included.
        generated_at: Report timestamp.
    """

    overall_wins: int = 0
    overall_losses: int = 0
    by_team: dict[TeamId, Bucket] = field(default_factory=dict)
    by_session: dict[SeasonKey, Bucket] = field(default_factory=dict)
    head_to_head: dict[str, Bucket] = field(default_factory=dict)
    by_position: dict[int, Bucket] = field(default_factory=dict)
    by_location: dict[str, Bucket] = field(default_factory=dict)
    score_distribution: dict[str, Bucket] = field(default_factory=dict)
    by_skill_difference: dict[int, Bucket] = field(default_factory=dict)
    by_opponent_skill: dict[int, Bucket] = field(default_factory=dict)
    by_my_skill: dict[int, Bucket] = field(default_factory=dict)
    by_innings: dict[str, Bucket] = field(default_factory=dict)
    by_team_situation: dict[str, Bucket] = field(default_factory=dict)
    total_matches: int = 0
    total_teams: int = 0
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def win_percentage(self) -> float:
        return win_percentage(self.overall_wins, self.total_matches)

    def dimensions(self) -> dict[str, dict[Any, Bucket]]:
        """All bucketed dimensions by name."""
        return {name: getattr(self, name) for name in DIMENSIONS}

    def to_dict(self) -> dict[str, Any]:
        """Convert report to a JSON-friendly dictionary."""
        result: dict[str, Any] = {
            "overall_wins": self.overall_wins,
            "overall_losses": self.overall_losses,
            "win_percentage": self.win_percentage,
        }
        for name, buckets in self.dimensions().items():
            result[name] = {str(key): bucket.to_dict() for key, bucket in buckets.items()}
        result["total_matches"] = self.total_matches
        result["total_teams"] = self.total_teams
        result["generated_at"] = self.generated_at.isoformat()
        return result


def build_report(
    records: Sequence[PlayerGameRecord],
    total_teams: int,
) -> SeasonReport:
    """Build a SeasonReport from normalized records."""
    dimensions = aggregate_records(records)
    wins = sum(1 for record in records if record.is_win)

    report = SeasonReport(
        overall_wins=wins,
        overall_losses=len(records) - wins,
        total_matches=len(records),
        total_teams=total_teams,
        **dimensions,
    )
    logger.info(
        "Built season report: {} games across {} teams", len(records), total_teams
    )
    return report


# =============================================================================
# Ordering-sensitive Statistics
# =============================================================================


def sort_by_date(records: Iterable[PlayerGameRecord]) -> list[PlayerGameRecord]:
    """Sort records by match date; same-date records keep input order."""
    return sorted(records, key=lambda record: record.date)


def longest_win_streak(records: Sequence[PlayerGameRecord]) -> int:
    """Longest run of consecutive wins, walking date-sorted records newest first."""
    longest = current = 0
    for record in reversed(records):
        if record.is_win:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


@dataclass(frozen=True)
class SkillProgression:
    """Skill level at the start, end and peak of a season."""

    starting: int = DEFAULT_SKILL_LEVEL
    ending: int = DEFAULT_SKILL_LEVEL
    highest: int = DEFAULT_SKILL_LEVEL

    @property
    def change(self) -> int:
        return self.ending - self.starting


def skill_progression(records: Sequence[PlayerGameRecord]) -> SkillProgression:
    """Skill progression over date-sorted records."""
    if not records:
        return SkillProgression()
    skills = [record.player_skill for record in records]
    return SkillProgression(starting=skills[0], ending=skills[-1], highest=max(skills))


# =============================================================================
# Named Records and Rankings
# =============================================================================


@dataclass(frozen=True)
class TeamRecord:
    """A team-season's record."""

    team_id: TeamId
    team_name: str
    team_type: TeamType
    season_key: SeasonKey
    wins: int
    losses: int
    win_percentage: float

    @property
    def total(self) -> int:
        return self.wins + self.losses


@dataclass(frozen=True)
class LocationRecord:
    """Record at one location."""

    location: str
    wins: int
    losses: int
    win_percentage: float

    @property
    def total(self) -> int:
        return self.wins + self.losses


@dataclass(frozen=True)
class PositionRecord:
    """Record at one match position."""

    position: int
    wins: int
    losses: int
    win_percentage: float

    @property
    def total(self) -> int:
        return self.wins + self.losses


@dataclass(frozen=True)
class OpponentRecord:
    """Head-to-head record against one opponent."""

    opponent_name: str
    wins: int
    losses: int
    win_percentage: float
    total_matches: int

    @property
    def total(self) -> int:
        return self.total_matches


@dataclass(frozen=True)
class OpponentMatchup:
    """One game against an opponent, with the overall head-to-head attached."""

    opponent_name: str
    wins: int
    losses: int
    win_percentage: float
    total_matches: int
    opponent_skill: int
    date: datetime
    is_win: bool

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


def team_records(
    records: Sequence[PlayerGameRecord],
    teams: Sequence[TeamSeason],
) -> list[TeamRecord]:
    """Per-team records in team order; teams without games report 0-0."""
    buckets = aggregate_dimension(records_to_frame(records), "team_id")
    rows = []
    for team in teams:
        bucket = buckets.get(team.id, Bucket())
        rows.append(
            TeamRecord(
                team_id=team.id,
                team_name=team.name,
                team_type=team.type,
                season_key=team.session_key,
                wins=bucket.wins,
                losses=bucket.losses,
                win_percentage=bucket.win_percentage,
            )
        )
    return rows


def best_team(rows: Sequence[TeamRecord]) -> TeamRecord:
    """Team with the highest win percentage; the earlier team wins ties."""
    best = rows[0]
    for row in rows[1:]:
        if row.win_percentage > best.win_percentage:
            best = row
    return best


def location_records(buckets: dict[str, Bucket]) -> list[LocationRecord]:
    return [
        LocationRecord(key, b.wins, b.losses, b.win_percentage)
        for key, b in buckets.items()
    ]


def position_records(buckets: dict[int, Bucket]) -> list[PositionRecord]:
    return [
        PositionRecord(int(key), b.wins, b.losses, b.win_percentage)
        for key, b in buckets.items()
    ]


def opponent_records(buckets: dict[str, Bucket]) -> list[OpponentRecord]:
    return [
        OpponentRecord(key, b.wins, b.losses, b.win_percentage, b.total)
        for key, b in buckets.items()
    ]


Ranked = TypeVar("Ranked", LocationRecord, PositionRecord, OpponentRecord)


def rank_by_win_percentage(rows: Sequence[Ranked]) -> list[Ranked]:
    """Sort by win percentage then sample size, both descending.

    Remaining ties keep input order.
    """
    return sorted(rows, key=lambda row: (-row.win_percentage, -row.total))


def best_and_worst(rows: Sequence[Ranked]) -> tuple[Ranked, Ranked]:
    """Best and worst row by win percentage.

    Ties on win percentage go to the larger sample, then to input order.
    A single row is both best and worst.

    Raises:
        ValueError: If rows is empty.
    """
    if not rows:
        raise ValueError("Cannot rank an empty dimension")
    best = rank_by_win_percentage(rows)[0]
    worst = sorted(rows, key=lambda row: (row.win_percentage, -row.total))[0]
    return best, worst


def top_and_bottom(
    rows: Sequence[Ranked],
    n: int = DEFAULT_TOP_N,
) -> tuple[list[Ranked], list[Ranked]]:
    """Top-n and bottom-n rows by win percentage.

    The bottom list is the tail of the descending ranking, reversed so the
    worst row comes first. With fewer than n rows the two lists overlap.
    """
    ranked = rank_by_win_percentage(rows)
    return ranked[:n], list(reversed(ranked[-n:]))


def most_played_opponents(
    rows: Sequence[OpponentRecord],
    n: int = DEFAULT_TOP_N,
) -> list[OpponentRecord]:
    """Opponents faced most often; ties keep first-faced order."""
    return sorted(rows, key=lambda row: -row.total_matches)[:n]


def best_head_to_head(rows: Sequence[OpponentRecord]) -> OpponentRecord | None:
    """Best winning head-to-head record by win percentage, if any."""
    winning = [row for row in rows if row.total_matches >= 1 and row.wins > row.losses]
    if not winning:
        return None
    return sorted(winning, key=lambda row: -row.win_percentage)[0]


def opponent_matchups(
    records: Sequence[PlayerGameRecord],
    opponents: Sequence[OpponentRecord],
) -> list[OpponentMatchup]:
    """One matchup per record, in record order, with head-to-head attached."""
    by_name = {row.opponent_name: row for row in opponents}
    matchups = []
    for record in records:
        head_to_head = by_name[record.opponent_name]
        matchups.append(
            OpponentMatchup(
                opponent_name=record.opponent_name,
                wins=head_to_head.wins,
                losses=head_to_head.losses,
                win_percentage=head_to_head.win_percentage,
                total_matches=head_to_head.total_matches,
                opponent_skill=record.opponent_skill,
                date=record.date,
                is_win=record.is_win,
            )
        )
    return matchups


def skill_extremes(
    matchups: Sequence[OpponentMatchup],
    n: int = DEFAULT_TOP_N,
) -> tuple[list[OpponentMatchup], list[OpponentMatchup]]:
    """Lowest- and highest-skill opponents faced.

    Matchups are deduplicated by (name, skill), keeping the first
    occurrence, then ranked by skill descending.

    Returns:
        Tuple of (lowest, highest); the lowest list starts with the
        lowest-skill opponent.
    """
    seen: set[tuple[str, int]] = set()
    unique = []
    for matchup in matchups:
        key = (matchup.opponent_name, matchup.opponent_skill)
        if key in seen:
            continue
        seen.add(key)
        unique.append(matchup)

    ranked = sorted(unique, key=lambda matchup: -matchup.opponent_skill)
    if not ranked:
        return [], []
    return list(reversed(ranked[-n:])), ranked[:n]
