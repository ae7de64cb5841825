"""Highlight selection and slide assembly for the season wrapped recap.

Slides come out in a fixed order:

    welcome -> record summary -> team breakdown (multi-team only)
    -> location/position breakdown -> rivals -> archetypes -> summary

Example:
    >>> from season_wrapped.output.composer import compose_slides
    >>> slides = compose_slides(records, teams)
    >>> [slide.type for slide in slides]
    ['welcome', 'record_summary', 'location_position_breakdown', ...]
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from season_wrapped.logging import get_logger
from season_wrapped.output.slides import (
    ArchetypeSlide,
    BreakdownSlide,
    RecordSummarySlide,
    RivalsSlide,
    Slide,
    SummarySlide,
    TeamBreakdownSlide,
    WelcomeSlide,
)
from season_wrapped.stats.aggregation import (
    DEFAULT_TOP_N,
    LocationRecord,
    OpponentRecord,
    PositionRecord,
    SkillProgression,
    aggregate_dimension,
    best_and_worst,
    best_head_to_head,
    best_team,
    location_records,
    longest_win_streak,
    most_played_opponents,
    opponent_matchups,
    opponent_records,
    position_records,
    records_to_frame,
    round_half_up,
    skill_extremes,
    skill_progression,
    sort_by_date,
    team_records,
    top_and_bottom,
    win_percentage,
)
from season_wrapped.stats.archetypes import DEFAULT_TOP_ARCHETYPES, rank_archetypes
from season_wrapped.types import InsufficientDataError

if TYPE_CHECKING:
    from season_wrapped.data.models import PlayerGameRecord, TeamSeason

logger = get_logger(__name__)

# =============================================================================
# Constants
# =============================================================================

MIN_GAMES: int = 5
MAX_HIGHLIGHTS: int = 3

STREAK_HIGHLIGHT_MIN: int = 3
WIN_RATE_HIGHLIGHT_MIN: float = 70.0
WIN_RATE_HIGHLIGHT_MIN_GAMES: int = 5
HEAD_TO_HEAD_HIGHLIGHT_MIN_WINS: int = 2
PERFECT_POSITION_MIN_WINS: int = 2
LOCATION_HIGHLIGHT_MIN: float = 80.0
LOCATION_HIGHLIGHT_MIN_WINS: int = 3
VOLUME_HIGHLIGHT_MIN_GAMES: int = 10


# =============================================================================
# Highlights
# =============================================================================


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def select_highlights(
    records: Sequence[PlayerGameRecord],
    progression: SkillProgression,
    streak: int,
    opponents: Sequence[OpponentRecord],
    best_position: PositionRecord,
    best_location: LocationRecord,
    max_highlights: int = MAX_HIGHLIGHTS,
) -> list[str]:
    """Pick highlights greedily in priority order.

    A rule is only tried while fewer than ``max_highlights`` have been
    picked, so the list never exceeds that cap.

    Args:
        records: Date-sorted records for the season.
        progression: Skill progression over the records.
        streak: Longest win streak.
        opponents: Head-to-head records.
        best_position: Best match position record.
        best_location: Best location record.
        max_highlights: Cap on the number of highlights.

    Returns:
        Highlight lines, highest priority first.
    """
    total = len(records)
    wins = sum(1 for record in records if record.is_win)
    raw_win_rate = wins / total * 100 if total else 0.0
    head_to_head = best_head_to_head(opponents)

    rules = [
        lambda: (
            f"Had a {streak}-game winning streak"
            if streak >= STREAK_HIGHLIGHT_MIN
            else None
        ),
        lambda: (
            f"Improved from skill {progression.starting} to {progression.ending}"
            if progression.ending > progression.starting
            else None
        ),
        lambda: _win_highlight(wins, total, raw_win_rate),
        lambda: (
            f"Beat {head_to_head.opponent_name} {head_to_head.wins}-{head_to_head.losses}"
            if head_to_head is not None
            and head_to_head.wins >= HEAD_TO_HEAD_HIGHLIGHT_MIN_WINS
            else None
        ),
        lambda: (
            f"Perfect {best_position.wins}-0 record at position {best_position.position}"
            if best_position.win_percentage == 100.0
            and best_position.wins >= PERFECT_POSITION_MIN_WINS
            else None
        ),
        lambda: (
            f"Dominant {int(round_half_up(best_location.win_percentage))}% "
            f"win rate at {best_location.location}"
            if best_location.win_percentage >= LOCATION_HIGHLIGHT_MIN
            and best_location.wins >= LOCATION_HIGHLIGHT_MIN_WINS
            else None
        ),
        lambda: (
            f"Played {total} total games"
            if total >= VOLUME_HIGHLIGHT_MIN_GAMES
            else None
        ),
    ]

    highlights: list[str] = []
    for rule in rules:
        if len(highlights) >= max_highlights:
            break
        line = rule()
        if line is not None:
            highlights.append(line)
    return highlights


def _win_highlight(wins: int, total: int, raw_win_rate: float) -> str | None:
    if raw_win_rate >= WIN_RATE_HIGHLIGHT_MIN and total >= WIN_RATE_HIGHLIGHT_MIN_GAMES:
        return f"Won {int(round_half_up(raw_win_rate))}% of your matches"
    if wins > 0:
        return f"Won {wins} {_plural(wins, 'match', 'matches')}"
    return None


def fun_stat(records: Sequence[PlayerGameRecord]) -> str:
    """Distinct locations played, or distinct opponents when only one location."""
    locations = {record.location for record in records}
    if len(locations) > 1:
        return f"Played at {len(locations)} different locations"
    opponents = {record.opponent_name for record in records}
    return (
        f"Faced {len(opponents)} different "
        f"{_plural(len(opponents), 'opponent', 'opponents')}"
    )


# =============================================================================
# Slides
# =============================================================================


def compose_slides(
    records: Sequence[PlayerGameRecord],
    teams: Sequence[TeamSeason],
    min_games: int = MIN_GAMES,
    top_archetypes: int = DEFAULT_TOP_ARCHETYPES,
    max_highlights: int = MAX_HIGHLIGHTS,
    context: str = "",
) -> list[Slide]:
    """Assemble the ordered slide sequence for a season.

    Args:
        records: All records for the selected team-seasons, any order.
        teams: Selected team-seasons.
        min_games: Minimum number of games for a recap.
        top_archetypes: Number of archetypes on the archetype slide.
        max_highlights: Cap on summary highlights.
        context: Season label used in the insufficient-data message.

    Returns:
        Slides in presentation order.

    Raises:
        InsufficientDataError: If fewer than ``min_games`` games were played.
    """
    if len(records) < min_games:
        raise InsufficientDataError(len(records), min_games, context)

    ordered = sort_by_date(records)
    frame = records_to_frame(ordered)
    wins = sum(1 for record in ordered if record.is_win)
    losses = len(ordered) - wins
    progression = skill_progression(ordered)
    streak = longest_win_streak(ordered)

    slides: list[Slide] = [
        WelcomeSlide(total_games=len(ordered)),
        RecordSummarySlide(
            wins=wins,
            losses=losses,
            win_percentage=win_percentage(wins, len(ordered)),
            starting_skill=progression.starting,
            ending_skill=progression.ending,
            highest_skill=progression.highest,
            longest_win_streak=streak,
        ),
    ]

    if len(teams) > 1:
        rows = team_records(ordered, teams)
        slides.append(TeamBreakdownSlide(teams=rows, best_team=best_team(rows)))

    locations = location_records(aggregate_dimension(frame, "location"))
    positions = position_records(aggregate_dimension(frame, "position"))
    best_location, worst_location = best_and_worst(locations)
    best_position, worst_position = best_and_worst(positions)
    top_locations, bottom_locations = top_and_bottom(locations, DEFAULT_TOP_N)
    slides.append(
        BreakdownSlide(
            best_location=best_location,
            worst_location=worst_location,
            best_position=best_position,
            worst_position=worst_position,
            top_locations=top_locations,
            bottom_locations=bottom_locations,
        )
    )

    opponents = opponent_records(aggregate_dimension(frame, "opponent_name"))
    matchups = opponent_matchups(ordered, opponents)
    lowest, highest = skill_extremes(matchups, DEFAULT_TOP_N)
    slides.append(
        RivalsSlide(
            most_played=most_played_opponents(opponents, DEFAULT_TOP_N),
            season_opener=matchups[0],
            season_closer=matchups[-1],
            lowest_skill_opponents=lowest,
            highest_skill_opponents=highest,
        )
    )

    slides.append(ArchetypeSlide(top=rank_archetypes(ordered, top_archetypes)))

    slides.append(
        SummarySlide(
            highlights=select_highlights(
                ordered,
                progression,
                streak,
                opponents,
                best_position,
                best_location,
                max_highlights=max_highlights,
            ),
            fun_stat=fun_stat(ordered),
        )
    )

    logger.debug("Composed {} slides from {} games", len(slides), len(ordered))
    return slides
