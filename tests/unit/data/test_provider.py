"""Tests for provider payload models and the file-backed client."""
from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

import pytest
from pydantic import ValidationError

from season_wrapped.data.provider import (
    JsonProviderClient,
    ProviderMatchDetails,
    ProviderMembership,
    ProviderScheduledMatch,
)


class TestProviderModels:
    """Tests for boundary payload models."""

    def test_membership_coerces_int_ids(self) -> None:
        """Integer ids from the provider should become strings."""
        membership = ProviderMembership.model_validate(
            {
                "id": 2468,
                "__typename": "EightBallPlayer",
                "session": {"id": 7, "name": "Fall 2025"},
                "team": {"id": 100, "name": "Chalk Dust"},
            }
        )

        assert membership.id == "2468"
        assert membership.team is not None
        assert membership.team.id == "100"
        assert membership.typename == "EightBallPlayer"

    def test_membership_requires_session(self) -> None:
        """A membership without a session should fail validation."""
        with pytest.raises(ValidationError):
            ProviderMembership.model_validate({"id": 1})

    def test_unknown_fields_are_ignored(self) -> None:
        """Extra provider fields should not break validation."""
        entry = ProviderScheduledMatch.model_validate(
            {"id": 5, "status": "COMPLETED", "isBye": False, "weekOfPlay": 3}
        )

        assert entry.id == "5"

    @pytest.mark.parametrize(
        ("payload", "played"),
        [
            ({"id": 1, "status": "COMPLETED", "isBye": False}, True),
            ({"id": None, "status": "COMPLETED", "isBye": False}, False),
            ({"id": 1, "status": "UNPLAYED", "isBye": False}, False),
            ({"id": 1, "status": "COMPLETED", "isBye": True}, False),
        ],
    )
    def test_scheduled_match_is_played(self, payload: dict, played: bool) -> None:
        """Byes, unplayed and id-less entries should not count as played."""
        assert ProviderScheduledMatch.model_validate(payload).is_played is played

    def test_match_details_parse(self, match_payload: Callable[..., dict[str, Any]]) -> None:
        """Match details should parse start time and both result blocks."""
        raw = match_payload(
            "900",
            [("1", "Sam", 4, 2, "2", "Alex", 5, 0)],
            start_time=datetime(2025, 9, 4, 19, 0),
        )

        details = ProviderMatchDetails.model_validate(raw)

        assert details.start_time == datetime(2025, 9, 4, 19, 0, tzinfo=timezone.utc)
        home = details.result_for("HOME")
        assert home is not None
        assert home.scores[0].eight_ball_match_points_earned == 2
        assert details.result_for("AWAY") is not None
        assert details.result_for("NEUTRAL") is None

    @pytest.mark.parametrize(
        "start_time",
        ["2025-09-04T19:00:00", "2025-09-04T19:00:00Z", "2025-09-04T15:00:00-04:00"],
    )
    def test_start_time_normalized_to_utc(
        self, start_time: str, match_payload: Callable[..., dict[str, Any]]
    ) -> None:
        """Naive, Z-suffixed and offset start times should all become the same UTC instant."""
        raw = match_payload("900", [("1", "Sam", 4, 2, "2", "Alex", 5, 0)])
        raw["startTime"] = start_time

        details = ProviderMatchDetails.model_validate(raw)

        assert details.start_time.utcoffset() == timedelta(0)
        assert details.start_time == datetime(2025, 9, 4, 19, 0, tzinfo=timezone.utc)

    def test_score_row_requires_position(self) -> None:
        """A score row without a match position should fail validation."""
        raw = {
            "id": 1,
            "startTime": "2025-09-04T19:00:00",
            "home": {"id": 1},
            "away": {"id": 2},
            "results": [{"homeAway": "HOME", "scores": [{"id": 3}]}],
        }
        with pytest.raises(ValidationError):
            ProviderMatchDetails.model_validate(raw)


class TestJsonProviderClient:
    """Tests for JsonProviderClient."""

    def test_lists_team_seasons(self, tmp_path: Path) -> None:
        """Memberships should be read from teams/<player>.json."""
        (tmp_path / "teams").mkdir()
        (tmp_path / "teams" / "42.json").write_text(json.dumps([{"id": 1}]))

        client = JsonProviderClient(tmp_path)

        assert client.list_team_seasons("42") == [{"id": 1}]

    def test_unknown_player_returns_empty(self, tmp_path: Path) -> None:
        """A missing membership export should yield no team-seasons."""
        assert JsonProviderClient(tmp_path).list_team_seasons("nobody") == []

    def test_schedule_drops_byes_and_unplayed(self, tmp_path: Path) -> None:
        """Schedules should only contain played matches."""
        (tmp_path / "schedules").mkdir()
        schedule = [
            {"id": 1, "status": "COMPLETED", "isBye": False},
            {"id": 2, "status": "UNPLAYED", "isBye": False},
            {"id": None, "status": "COMPLETED", "isBye": True},
        ]
        (tmp_path / "schedules" / "100.json").write_text(json.dumps(schedule))

        played = JsonProviderClient(tmp_path).list_matches_for_team("100")

        assert [entry["id"] for entry in played] == [1]

    def test_missing_schedule_returns_empty(self, tmp_path: Path) -> None:
        """A team without an exported schedule should have no matches."""
        assert JsonProviderClient(tmp_path).list_matches_for_team("100") == []

    def test_missing_match_raises(self, tmp_path: Path) -> None:
        """Fetching an unexported match should raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            JsonProviderClient(tmp_path).get_match_details("404")
