"""Integration tests for the season report pipeline.

Tests the flow from an exported provider directory, read through
JsonProviderClient, to the multi-dimensional season report.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable

import pytest

from season_wrapped.data.models import team_season_from_provider, team_season_id
from season_wrapped.data.provider import JsonProviderClient
from season_wrapped.data.seasons import season_predicate
from season_wrapped.pipeline import build_season_report, compute_season_report
from season_wrapped.types import NotFoundError

PLAYER = "42"


@pytest.fixture
def export_dir(
    tmp_path: Path,
    write_export: Callable[..., Path],
    membership_payload: Callable[..., dict[str, Any]],
    match_payload: Callable[..., dict[str, Any]],
) -> Path:
    """Export with a Fall 2025 eight-ball team and a Spring 2025 nine-ball team."""
    fall_start = datetime(2025, 9, 4, 19)
    spring_start = datetime(2025, 3, 6, 19)
    matches = {
        # Fall: tracked player at home, position 1, wins 2-0 then loses 1-2
        "f0": match_payload(
            "f0", [("me-fall", "Sam", 4, 2, "a1", "Alex", 5, 0)], start_time=fall_start
        ),
        "f1": match_payload(
            "f1",
            [("me-fall", "Sam", 4, 1, "a2", "Kim", 3, 2)],
            start_time=fall_start + timedelta(weeks=1),
            location="Rack Room",
        ),
        # Spring: tracked player away at position 2 after a home win
        "s0": match_payload(
            "s0",
            [
                ("h1", "Lee", 4, 2, "t1", "Teammate", 4, 0),
                ("h2", "Jo", 6, 0, "me-spring", "Sam", 3, 3),
            ],
            start_time=spring_start,
            home_team="300",
            away_team="101",
        ),
    }
    schedules = {
        "100": [
            {"id": "f0", "status": "COMPLETED", "isBye": False},
            {"id": "f1", "status": "COMPLETED", "isBye": False},
            {"id": None, "status": "COMPLETED", "isBye": True},
        ],
        "101": [
            {"id": "s0", "status": "COMPLETED", "isBye": False},
            {"id": "s1", "status": "UNPLAYED", "isBye": False},
        ],
    }
    memberships = {
        PLAYER: [
            membership_payload("me-fall", "100", "Chalk Dust", "Fall 2025"),
            membership_payload(
                "me-spring", "101", "Breakers", "Spring 2025", typename="NineBallPlayer"
            ),
        ]
    }
    return write_export(tmp_path / "export", memberships, schedules, matches)


@pytest.mark.integration
class TestBuildSeasonReport:
    """Tests for build_season_report over a file export."""

    def test_all_seasons(self, export_dir: Path) -> None:
        """Without a filter every team-season should be included."""
        report = build_season_report(PLAYER, JsonProviderClient(export_dir))

        assert report.total_teams == 2
        assert report.total_matches == 3
        assert (report.overall_wins, report.overall_losses) == (2, 1)
        assert report.win_percentage == 66.7
        assert list(report.by_session) == ["Spring 2025", "Fall 2025"]
        assert report.by_team[team_season_id("101")].wins == 1

    def test_dimensions(self, export_dir: Path) -> None:
        """Each dimension should bucket the three games."""
        report = build_season_report(PLAYER, JsonProviderClient(export_dir))

        assert report.by_location["Corner Pocket"].total == 2
        assert report.by_location["Rack Room"].losses == 1
        assert report.head_to_head["Jo"].wins == 1
        assert report.by_position[2].total == 1
        assert report.by_skill_difference[-3].wins == 1
        assert report.by_team_situation["team_losing"].wins == 1
        assert report.by_team_situation["team_tied"].total == 2
        assert report.score_distribution["30-0"].wins == 1
        assert report.by_innings["11-20"].total == 3

    def test_coverage_invariant(self, export_dir: Path) -> None:
        """Every dimension should account for every game."""
        report = build_season_report(PLAYER, JsonProviderClient(export_dir))

        for name, buckets in report.dimensions().items():
            assert sum(b.total for b in buckets.values()) == report.total_matches, name

    def test_season_filter(self, export_dir: Path) -> None:
        """A season filter should restrict the report to that season."""
        report = build_season_report(
            PLAYER, JsonProviderClient(export_dir), season_predicate("Fall 2025"), "Fall 2025"
        )

        assert report.total_teams == 1
        assert report.total_matches == 2
        assert list(report.by_session) == ["Fall 2025"]

    def test_unknown_player(self, export_dir: Path) -> None:
        """A player without memberships should raise NotFoundError."""
        with pytest.raises(NotFoundError):
            build_season_report("7", JsonProviderClient(export_dir))

    def test_to_dict_is_json_ready(self, export_dir: Path) -> None:
        """The report dictionary should use string keys throughout."""
        data = build_season_report(PLAYER, JsonProviderClient(export_dir)).to_dict()

        assert data["by_position"]["1"]["wins"] == 1
        assert data["by_team_situation"]["team_losing"]["win_percentage"] == 100.0


@pytest.mark.integration
class TestComputeSeasonReport:
    """Tests for compute_season_report over pre-fetched payloads."""

    def test_prefetched_payloads(
        self,
        export_dir: Path,
        membership_payload: Callable[..., dict[str, Any]],
    ) -> None:
        """Pre-fetched matches should produce the same counts."""
        client = JsonProviderClient(export_dir)
        fall = team_season_from_provider(
            membership_payload("me-fall", "100", "Chalk Dust", "Fall 2025")
        )
        matches = [client.get_match_details("f0"), client.get_match_details("f1")]

        report = compute_season_report([fall], {fall.id: matches}, {fall.id: "me-fall"})

        assert report.total_matches == 2
        assert report.total_teams == 1
        assert report.by_team[fall.id].wins == 1

    def test_team_without_player_id(
        self,
        export_dir: Path,
        membership_payload: Callable[..., dict[str, Any]],
    ) -> None:
        """A team with no known player id should contribute no games."""
        client = JsonProviderClient(export_dir)
        fall = team_season_from_provider(
            membership_payload("me-fall", "100", "Chalk Dust", "Fall 2025")
        )

        report = compute_season_report(
            [fall], {fall.id: [client.get_match_details("f0")]}, {}
        )

        assert report.total_matches == 0
        assert report.total_teams == 1
