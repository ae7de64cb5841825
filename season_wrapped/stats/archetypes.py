"""Archetype scoring heuristics.

A fixed catalog of named heuristics, each scored from the subset of games
it cares about. A heuristic whose subset is empty is left out rather than
scored as zero. Every score carries an explanation built from the same
counts the score was computed from.

Example:
    >>> from season_wrapped.stats.archetypes import rank_archetypes
    >>> for archetype in rank_archetypes(records):
    ...     print(archetype.name, archetype.score)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Callable, Sequence

from season_wrapped.stats.aggregation import (
    format_percentage,
    longest_win_streak,
    round_half_up,
    skill_progression,
    sort_by_date,
)
from season_wrapped.types import TeamSituation

if TYPE_CHECKING:
    from season_wrapped.data.models import PlayerGameRecord

# =============================================================================
# Constants
# =============================================================================

DEFAULT_TOP_ARCHETYPES: int = 5
MAX_SCORE: float = 100.0

POINTS_PER_SKILL_LEVEL: int = 20
POINTS_PER_STREAK_WIN: int = 10

ANCHOR_MIN_POSITION: int = 4
OPENER_MAX_POSITION: int = 2

SWEEP_SCORES: frozenset[tuple[int, int]] = frozenset({(3, 0), (0, 3)})
CLOSE_WIN_SCORES: frozenset[tuple[int, int]] = frozenset({(2, 1)})
DECISIVE_WIN_SCORES: frozenset[tuple[int, int]] = frozenset({(2, 0), (3, 0)})
CLOSE_LOSS_SCORES: frozenset[tuple[int, int]] = frozenset({(1, 2)})
DECISIVE_LOSS_SCORES: frozenset[tuple[int, int]] = frozenset({(0, 2), (0, 3)})
FULL_DISTANCE_SCORES: frozenset[tuple[int, int]] = CLOSE_WIN_SCORES | CLOSE_LOSS_SCORES


@dataclass(frozen=True)
class ArchetypeScore:
    """A scored archetype.

    Attributes:
        name: Archetype name.
        description: One-line description.
        score: Score on a 0-100 scale, rounded half-up to one decimal.
        explanation: The counts behind the score, in words.
    """

    name: str
    description: str
    score: float
    explanation: str

    def to_dict(self) -> dict[str, str | float]:
        return asdict(self)


Scorer = Callable[["Sequence[PlayerGameRecord]"], "tuple[float, str] | None"]


@dataclass(frozen=True)
class Archetype:
    """Catalog entry: a name, a description and its scorer."""

    name: str
    description: str
    scorer: Scorer

    def evaluate(
        self, records: Sequence[PlayerGameRecord]
    ) -> tuple[float, ArchetypeScore] | None:
        """Score the records, or None when the heuristic does not apply.

        Returns:
            The unrounded score, used for ranking, and the rounded result.
        """
        result = self.scorer(records)
        if result is None:
            return None
        raw, explanation = result
        return raw, ArchetypeScore(
            name=self.name,
            description=self.description,
            score=_rounded(raw),
            explanation=explanation,
        )


# =============================================================================
# Scorers
# =============================================================================


def _clamp(score: float) -> float:
    return min(MAX_SCORE, max(0.0, score))


def _rounded(score: float) -> float:
    return round_half_up(score, 1)


def _score_pair(record: PlayerGameRecord) -> tuple[int, int]:
    return record.player_score, record.opponent_score


def _win_rate(
    predicate: Callable[[PlayerGameRecord], bool],
    context: str,
) -> Scorer:
    """Scorer for 'win rate within a subset' heuristics."""

    def scorer(records: Sequence[PlayerGameRecord]) -> tuple[float, str] | None:
        subset = [record for record in records if predicate(record)]
        if not subset:
            return None
        wins = sum(1 for record in subset if record.is_win)
        score = _clamp(wins / len(subset) * 100)
        return score, (
            f"Won {wins} out of {len(subset)} matches {context} "
            f"({format_percentage(_rounded(score))}% win rate)"
        )

    return scorer


def _skill_climber(records: Sequence[PlayerGameRecord]) -> tuple[float, str] | None:
    if not records:
        return None
    progression = skill_progression(sort_by_date(records))
    score = _clamp(progression.change * POINTS_PER_SKILL_LEVEL)
    return score, (
        f"Went from skill level {progression.starting} to {progression.ending} "
        f"({progression.change:+d} levels, {POINTS_PER_SKILL_LEVEL} points per level, "
        "capped at 100)"
    )


def _streak_master(records: Sequence[PlayerGameRecord]) -> tuple[float, str] | None:
    if not records:
        return None
    streak = longest_win_streak(sort_by_date(records))
    score = _clamp(streak * POINTS_PER_STREAK_WIN)
    return score, (
        f"Longest winning streak of {streak} matches "
        f"({POINTS_PER_STREAK_WIN} points per win, capped at 100)"
    )


def _sweeps(records: Sequence[PlayerGameRecord]) -> tuple[float, str] | None:
    if not records:
        return None
    sweeps = sum(1 for record in records if _score_pair(record) in SWEEP_SCORES)
    score = _clamp(sweeps / len(records) * 100)
    return score, (
        f"{sweeps} out of {len(records)} matches ended in a sweep, 3-0 or 0-3 "
        f"({format_percentage(_rounded(score))}%)"
    )


def _close_margin(
    is_win: bool,
    close_scores: frozenset[tuple[int, int]],
    decisive_scores: frozenset[tuple[int, int]],
    noun: str,
) -> Scorer:
    """Scorer comparing close against decisive results among wins or losses."""
    close_label = "/".join(f"{a}-{b}" for a, b in sorted(close_scores))
    decisive_label = "/".join(f"{a}-{b}" for a, b in sorted(decisive_scores, reverse=True))

    def scorer(records: Sequence[PlayerGameRecord]) -> tuple[float, str] | None:
        subset = [record for record in records if record.is_win == is_win]
        if not subset:
            return None
        close = sum(1 for record in subset if _score_pair(record) in close_scores)
        decisive = sum(1 for record in subset if _score_pair(record) in decisive_scores)
        if close == 0 or close <= decisive:
            return None
        score = _clamp(close / (close + decisive) * 100)
        return score, (
            f"{close} {noun} by {close_label} against {decisive} by {decisive_label} "
            f"({format_percentage(_rounded(score))}% close)"
        )

    return scorer


def _grinder(records: Sequence[PlayerGameRecord]) -> tuple[float, str] | None:
    full = sum(1 for record in records if _score_pair(record) in FULL_DISTANCE_SCORES)
    if full == 0:
        return None
    score = _clamp(full / len(records) * 100)
    return score, (
        f"{full} out of {len(records)} matches went the distance, 2-1 or 1-2 "
        f"({format_percentage(_rounded(score))}%)"
    )


# =============================================================================
# Catalog
# =============================================================================

# Declaration order breaks score ties
CATALOG: tuple[Archetype, ...] = (
    Archetype(
        "Closer",
        "Finishes the job when the team is ahead",
        _win_rate(
            lambda r: r.team_situation is TeamSituation.WINNING,
            "when your team was winning",
        ),
    ),
    Archetype(
        "Comeback Kid",
        "Thrives when the team is behind",
        _win_rate(
            lambda r: r.team_situation is TeamSituation.LOSING,
            "when your team was losing",
        ),
    ),
    Archetype(
        "Anchor",
        "Reliable in the closing positions",
        _win_rate(
            lambda r: r.position >= ANCHOR_MIN_POSITION,
            f"in position {ANCHOR_MIN_POSITION} or later",
        ),
    ),
    Archetype(
        "Opener",
        "Sets the tone early in matches",
        _win_rate(
            lambda r: r.position <= OPENER_MAX_POSITION,
            f"in position {OPENER_MAX_POSITION} or earlier",
        ),
    ),
    Archetype(
        "Road Warrior",
        "Performs best on the road",
        _win_rate(lambda r: not r.is_home, "on the road"),
    ),
    Archetype(
        "Home Hero",
        "Dominates at home",
        _win_rate(lambda r: r.is_home, "at home"),
    ),
    Archetype(
        "Skill Climber",
        "Improved skill level throughout the season",
        _skill_climber,
    ),
    Archetype(
        "Underdog",
        "Wins despite being the lower-skilled player",
        _win_rate(
            lambda r: r.skill_difference < 0,
            "against higher-skilled opponents",
        ),
    ),
    Archetype(
        "Streak Master",
        "Maintains impressive winning streaks",
        _streak_master,
    ),
    Archetype(
        "All Gas No Breaks",
        "Matches end in sweeps, one way or the other",
        _sweeps,
    ),
    Archetype(
        "Close Call",
        "Wins come down to the wire",
        _close_margin(True, CLOSE_WIN_SCORES, DECISIVE_WIN_SCORES, "wins"),
    ),
    Archetype(
        "Close But No Cigar",
        "Losses come down to the wire",
        _close_margin(False, CLOSE_LOSS_SCORES, DECISIVE_LOSS_SCORES, "losses"),
    ),
    Archetype(
        "Grinder",
        "Matches go the distance",
        _grinder,
    ),
)


def _evaluate_catalog(
    records: Sequence[PlayerGameRecord],
) -> list[tuple[float, ArchetypeScore]]:
    evaluated = (archetype.evaluate(records) for archetype in CATALOG)
    return [result for result in evaluated if result is not None]


def score_archetypes(records: Sequence[PlayerGameRecord]) -> list[ArchetypeScore]:
    """Score every applicable archetype, in catalog order."""
    return [score for _, score in _evaluate_catalog(records)]


def rank_archetypes(
    records: Sequence[PlayerGameRecord],
    top_n: int = DEFAULT_TOP_ARCHETYPES,
) -> list[ArchetypeScore]:
    """Top archetypes by unrounded score; catalog order breaks ties."""
    ranked = sorted(_evaluate_catalog(records), key=lambda pair: -pair[0])
    return [score for _, score in ranked[:top_n]]
