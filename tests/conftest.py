"""Shared pytest fixtures for season wrapped tests.

This module contains fixtures used across multiple test modules:
- Configuration fixtures (test settings)
- Entity factories (team-seasons, per-game records)
- Provider payload builders (memberships, schedules, match details)
- A file-backed provider export in a temporary directory

Example:
    def test_something(make_record):
        record = make_record(is_win=True, position=4)
        assert record.score_key == "2-0"
"""
from __future__ import annotations

import json
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

from season_wrapped.config import Settings, reset_settings
from season_wrapped.data.models import PlayerGameRecord, TeamSeason, team_season_id
from season_wrapped.types import TeamSituation, TeamType

# Home player / away player / points per game:
# (home_id, home_name, home_skill, home_points, away_id, away_name, away_skill, away_points)
GameSpec = tuple[str, str, int, int, str, str, int, int]

SEASON_START = datetime(2025, 9, 4, 19, 0)


# =============================================================================
# Paths
# =============================================================================


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """Create and return temporary data directory."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def test_settings(tmp_data_dir: Path) -> Generator[Settings, None, None]:
    """Provide test settings with temporary directories.

    Automatically resets settings singleton after test.
    """
    os.environ["LOG_DIR"] = str(tmp_data_dir / "logs")
    os.environ["PROVIDER_DATA_DIR"] = str(tmp_data_dir / "provider")
    os.environ["LOG_LEVEL"] = "DEBUG"

    reset_settings()
    from season_wrapped.config import get_settings

    settings = get_settings()
    settings.ensure_directories()

    yield settings

    # Cleanup
    reset_settings()
    for key in ["LOG_DIR", "PROVIDER_DATA_DIR", "LOG_LEVEL"]:
        os.environ.pop(key, None)


# =============================================================================
# Entity Factories
# =============================================================================


@pytest.fixture
def make_team() -> Callable[..., TeamSeason]:
    """Factory for TeamSeason entities."""

    def factory(
        external_id: str = "100",
        name: str = "Chalk Dust",
        season: str = "Fall",
        season_year: int = 2025,
        team_type: TeamType = TeamType.EIGHT_BALL,
    ) -> TeamSeason:
        return TeamSeason(
            id=team_season_id(external_id),
            external_id=external_id,
            name=name,
            type=team_type,
            season=season,
            season_year=season_year,
        )

    return factory


@pytest.fixture
def make_record(make_team: Callable[..., TeamSeason]) -> Callable[..., PlayerGameRecord]:
    """Factory for PlayerGameRecord entities.

    Defaults describe a home win, 2-0, at position 1 against an equally
    skilled opponent. Pass ``day`` to offset the date from the season start.
    """
    team = make_team()

    def factory(day: int = 0, **overrides: Any) -> PlayerGameRecord:
        fields: dict[str, Any] = {
            "match_id": f"m{day}",
            "date": SEASON_START + timedelta(days=day),
            "is_win": True,
            "player_skill": 4,
            "opponent_skill": 4,
            "skill_difference": 0,
            "position": 1,
            "location": "Corner Pocket",
            "team_situation": TeamSituation.TIED,
            "is_home": True,
            "player_score": 2,
            "opponent_score": 0,
            "opponent_name": "Rival One",
            "team_id": team.id,
            "team_name": team.name,
            "team_type": team.type,
            "season_key": team.session_key,
            "innings": 15,
            "defensive_shots": 1,
        }
        fields.update(overrides)
        if "skill_difference" not in overrides:
            fields["skill_difference"] = fields["player_skill"] - fields["opponent_skill"]
        return PlayerGameRecord(**fields)

    return factory


# =============================================================================
# Provider Payload Builders
# =============================================================================


def _score_row(
    player_id: str,
    name: str,
    position: int,
    skill: int,
    points: int,
) -> dict[str, Any]:
    return {
        "id": f"s-{player_id}-{position}",
        "player": {"id": player_id, "displayName": name},
        "matchPositionNumber": position,
        "skillLevel": skill,
        "innings": 18,
        "defensiveShots": 2,
        "eightBallWins": 1 if points >= 2 else 0,
        "eightBallMatchPointsEarned": points,
        "nineBallMatchPointsEarned": points * 10,
    }


@pytest.fixture
def match_payload() -> Callable[..., dict[str, Any]]:
    """Builder for provider match-details payloads.

    Games are given in positional order; game i is played at position i+1.
    """

    def build(
        match_id: str,
        games: list[GameSpec],
        start_time: datetime = SEASON_START,
        location: str | None = "Corner Pocket",
        home_team: str = "100",
        away_team: str = "200",
    ) -> dict[str, Any]:
        home_rows, away_rows = [], []
        for position, game in enumerate(games, start=1):
            home_id, home_name, home_skill, home_pts, away_id, away_name, away_skill, away_pts = game
            home_rows.append(_score_row(home_id, home_name, position, home_skill, home_pts))
            away_rows.append(_score_row(away_id, away_name, position, away_skill, away_pts))

        home_total = sum(row["eightBallMatchPointsEarned"] for row in home_rows)
        away_total = sum(row["eightBallMatchPointsEarned"] for row in away_rows)
        return {
            "id": match_id,
            "startTime": start_time.isoformat(),
            "location": {"id": 1, "name": location} if location else None,
            "home": {"id": home_team, "name": "Home Team"},
            "away": {"id": away_team, "name": "Away Team"},
            "results": [
                {"homeAway": "HOME", "points": {"total": home_total}, "scores": home_rows},
                {"homeAway": "AWAY", "points": {"total": away_total}, "scores": away_rows},
            ],
        }

    return build


@pytest.fixture
def membership_payload() -> Callable[..., dict[str, Any]]:
    """Builder for provider team-membership payloads."""

    def build(
        member_id: str,
        team_id: str,
        team_name: str,
        session: str = "Fall 2025",
        typename: str = "EightBallPlayer",
    ) -> dict[str, Any]:
        return {
            "id": member_id,
            "__typename": typename,
            "nickName": "Sam",
            "skillLevel": 4,
            "session": {"id": 7, "name": session},
            "team": {"id": team_id, "name": team_name},
        }

    return build


class FakeProviderClient:
    """In-memory provider client keyed by player, team and match ids."""

    def __init__(
        self,
        memberships: dict[str, list[dict[str, Any]]] | None = None,
        schedules: dict[str, list[dict[str, Any]]] | None = None,
        matches: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self.memberships = memberships or {}
        self.schedules = schedules or {}
        self.matches = matches or {}
        self.detail_calls: list[str] = []

    def list_team_seasons(self, player_id: str) -> list[dict[str, Any]]:
        return self.memberships.get(player_id, [])

    def list_matches_for_team(self, team_external_id: str) -> list[dict[str, Any]]:
        return self.schedules.get(team_external_id, [])

    def get_match_details(self, match_external_id: str) -> dict[str, Any]:
        self.detail_calls.append(match_external_id)
        return self.matches[match_external_id]


@pytest.fixture
def fake_client_factory() -> Callable[..., FakeProviderClient]:
    """Factory for in-memory provider clients."""
    return FakeProviderClient


@pytest.fixture
def write_export() -> Callable[..., Path]:
    """Write a provider export directory readable by JsonProviderClient."""

    def write(
        root: Path,
        memberships: dict[str, list[dict[str, Any]]],
        schedules: dict[str, list[dict[str, Any]]],
        matches: dict[str, dict[str, Any]],
    ) -> Path:
        for folder, payloads in (
            ("teams", memberships),
            ("schedules", schedules),
            ("matches", matches),
        ):
            (root / folder).mkdir(parents=True, exist_ok=True)
            for key, payload in payloads.items():
                (root / folder / f"{key}.json").write_text(json.dumps(payload))
        return root

    return write


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
