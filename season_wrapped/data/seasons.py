"""Season selection for a player's team-seasons.

Filters team-seasons with a predicate over (season name, season year) and
provides the two stock predicates used by the recap: an exact "Season Year"
match and "any of Spring/Summer/Fall within a year".

Example:
    >>> from season_wrapped.data.seasons import season_predicate, select_team_seasons
    >>> fall = select_team_seasons(teams, season_predicate("Fall 2025"))
"""
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable, Iterable

from season_wrapped.types import InvalidSeasonFormatError, NotFoundError

if TYPE_CHECKING:
    from season_wrapped.data.models import TeamSeason

SeasonPredicate = Callable[[str, int], bool]

# =============================================================================
# Constants
# =============================================================================

SEASON_PATTERN = re.compile(r"(\w+) (\d+)")

# Chronological order of seasons within a year
SEASON_ORDER: dict[str, int] = {
    "Spring": 1,
    "Summer": 2,
    "Fall": 3,
    "Winter": 4,
}

# Seasons counted for a calendar-year recap; Winter straddles two years
YEAR_RECAP_SEASONS: frozenset[str] = frozenset({"Spring", "Summer", "Fall"})

DEFAULT_SEASON: str = "Fall"
DEFAULT_SEASON_YEAR: int = 2025


# =============================================================================
# Parsing
# =============================================================================


def parse_season_name(name: str) -> tuple[str, int]:
    """Split a provider session name into (season, year).

    Args:
        name: Session name, e.g. "Summer 2025".

    Returns:
        Tuple of season name and year.

    Raises:
        InvalidSeasonFormatError: If the name is not 'Name Year'.

    Example:
        >>> parse_season_name("Summer 2025")
        ('Summer', 2025)
    """
    match = SEASON_PATTERN.search(name or "")
    if match is None:
        raise InvalidSeasonFormatError(
            f"Season '{name}' is not in 'Season Year' format"
        )
    return match.group(1), int(match.group(2))


# =============================================================================
# Predicates
# =============================================================================


def season_predicate(season: str) -> SeasonPredicate:
    """Predicate matching exactly one 'Season Year' label."""
    name, year = parse_season_name(season.strip())

    def predicate(team_season: str, team_year: int) -> bool:
        return team_season == name and team_year == year

    return predicate


def year_predicate(year: int) -> SeasonPredicate:
    """Predicate matching Spring, Summer or Fall of one year (never Winter)."""

    def predicate(team_season: str, team_year: int) -> bool:
        return team_year == year and team_season in YEAR_RECAP_SEASONS

    return predicate


def default_predicate() -> SeasonPredicate:
    """Predicate for the default recap season."""
    return season_predicate(f"{DEFAULT_SEASON} {DEFAULT_SEASON_YEAR}")


# =============================================================================
# Selection
# =============================================================================


def select_team_seasons(
    teams: Iterable[TeamSeason],
    predicate: SeasonPredicate | None = None,
    label: str | None = None,
) -> list[TeamSeason]:
    """Select the team-seasons matching a predicate.

    Args:
        teams: All of a player's team-seasons.
        predicate: Filter over (season, year); defaults to the default season.
        label: Name of the selection used in the error message.

    Returns:
        Matching team-seasons in input order.

    Raises:
        NotFoundError: If nothing matches.
    """
    if predicate is None:
        predicate = default_predicate()
        label = label or f"{DEFAULT_SEASON} {DEFAULT_SEASON_YEAR}"
    selected = [team for team in teams if predicate(team.season, team.season_year)]
    if not selected:
        raise NotFoundError(f"No teams found for {label or 'the requested'} season")
    return selected


def sort_team_seasons(
    teams: Iterable[TeamSeason],
    descending: bool = False,
) -> list[TeamSeason]:
    """Order team-seasons chronologically by year then season.

    Unrecognized season names sort before Spring.
    """
    ordered = sorted(
        teams,
        key=lambda team: (team.season_year, SEASON_ORDER.get(team.season, 0)),
    )
    if descending:
        ordered.reverse()
    return ordered
