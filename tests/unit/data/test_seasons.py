"""Tests for season parsing and selection."""
from __future__ import annotations

from typing import Any, Callable

import pytest

from season_wrapped.data.seasons import (
    default_predicate,
    parse_season_name,
    season_predicate,
    select_team_seasons,
    sort_team_seasons,
    year_predicate,
)
from season_wrapped.types import InvalidSeasonFormatError, NotFoundError


@pytest.fixture
def teams(make_team: Callable[..., Any]) -> list[Any]:
    """Team-seasons across 2024 and 2025, out of chronological order."""
    return [
        make_team("1", "Fall Team", "Fall", 2025),
        make_team("2", "Spring Team", "Spring", 2025),
        make_team("3", "Winter Team", "Winter", 2025),
        make_team("4", "Old Team", "Summer", 2024),
    ]


class TestParseSeasonName:
    """Tests for parse_season_name."""

    def test_parses_name_and_year(self) -> None:
        """'Summer 2025' should split into name and year."""
        assert parse_season_name("Summer 2025") == ("Summer", 2025)

    @pytest.mark.parametrize("name", ["", "Fall", "2025"])
    def test_rejects_bad_format(self, name: str) -> None:
        """Strings that are not 'Name Year' should raise."""
        with pytest.raises(InvalidSeasonFormatError):
            parse_season_name(name)


class TestPredicates:
    """Tests for the stock predicates."""

    def test_season_predicate_exact(self) -> None:
        """season_predicate should match one name and year only."""
        predicate = season_predicate("Fall 2025")

        assert predicate("Fall", 2025)
        assert not predicate("Fall", 2024)
        assert not predicate("Spring", 2025)

    def test_season_predicate_rejects_bad_label(self) -> None:
        """An unparseable label should raise before any selection."""
        with pytest.raises(InvalidSeasonFormatError):
            season_predicate("last season")

    def test_year_predicate_excludes_winter(self) -> None:
        """The year predicate should cover Spring, Summer and Fall only."""
        predicate = year_predicate(2025)

        assert predicate("Spring", 2025)
        assert predicate("Summer", 2025)
        assert predicate("Fall", 2025)
        assert not predicate("Winter", 2025)
        assert not predicate("Fall", 2024)

    def test_default_predicate_is_fall_2025(self) -> None:
        """The default predicate should select Fall 2025."""
        predicate = default_predicate()

        assert predicate("Fall", 2025)
        assert not predicate("Spring", 2025)


class TestSelectTeamSeasons:
    """Tests for select_team_seasons."""

    def test_selects_matching(self, teams: list[Any]) -> None:
        """Only the requested season should be returned."""
        selected = select_team_seasons(teams, season_predicate("Fall 2025"))

        assert [team.name for team in selected] == ["Fall Team"]

    def test_default_selection(self, teams: list[Any]) -> None:
        """Without a predicate the default season should be used."""
        assert [team.name for team in select_team_seasons(teams)] == ["Fall Team"]

    def test_year_selection(self, teams: list[Any]) -> None:
        """The year predicate should skip Winter and other years."""
        selected = select_team_seasons(teams, year_predicate(2025))

        assert [team.name for team in selected] == ["Fall Team", "Spring Team"]

    def test_no_match_raises_not_found(self, teams: list[Any]) -> None:
        """An empty selection should raise NotFoundError with the label."""
        with pytest.raises(NotFoundError, match="Summer 2025"):
            select_team_seasons(teams, season_predicate("Summer 2025"), "Summer 2025")


class TestSortTeamSeasons:
    """Tests for sort_team_seasons."""

    def test_chronological(self, teams: list[Any]) -> None:
        """Seasons should sort by year, then Spring < Summer < Fall < Winter."""
        ordered = sort_team_seasons(teams)

        assert [team.name for team in ordered] == [
            "Old Team",
            "Spring Team",
            "Fall Team",
            "Winter Team",
        ]

    def test_descending(self, teams: list[Any]) -> None:
        """descending=True should put the latest season first."""
        assert sort_team_seasons(teams, descending=True)[0].name == "Winter Team"
