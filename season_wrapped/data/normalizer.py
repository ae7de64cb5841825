"""Match stream normalization into per-game player records.

Turns a team's match details into an ordered list of PlayerGameRecord, one
per game the tracked player took part in. Each record carries the team
situation at the moment the game began, reconstructed by replaying the
games of the match in positional order against two running counters.

Games between two other players emit nothing but still move the counters.
A game's winner is the side with the higher game score; a tie moves
neither counter.

Example:
    >>> from season_wrapped.data.normalizer import MatchStreamNormalizer
    >>> normalizer = MatchStreamNormalizer(team, player_id="2468")
    >>> result = normalizer.normalize_matches(raw_match_details)
    >>> print(len(result.records), len(result.failures))
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from pydantic import ValidationError

from season_wrapped.data.models import (
    UNKNOWN_NAME,
    GamePairing,
    Match,
    PlayerGameRecord,
    match_from_provider,
    pairings_from_provider,
)
from season_wrapped.data.provider import ProviderMatchDetails
from season_wrapped.logging import SUCCESS, WARN, get_logger
from season_wrapped.types import (
    MatchId,
    PartialIngestFailure,
    PlayerId,
    RawPayload,
    TeamSituation,
)

if TYPE_CHECKING:
    from season_wrapped.data.models import TeamSeason

logger = get_logger(__name__)


@dataclass
class RunningScore:
    """Games won so far by each side of a match."""

    home: int = 0
    away: int = 0

    def situation_for(self, is_home: bool) -> TeamSituation:
        """Team situation from one side's point of view."""
        ours, theirs = (self.home, self.away) if is_home else (self.away, self.home)
        if ours > theirs:
            return TeamSituation.WINNING
        if ours < theirs:
            return TeamSituation.LOSING
        return TeamSituation.TIED

    def record_game(self, home_score: int, away_score: int) -> None:
        """Credit the game to whichever side scored more."""
        if home_score > away_score:
            self.home += 1
        elif away_score > home_score:
            self.away += 1


@dataclass
class NormalizedMatch:
    """A match and the tracked player's records from it."""

    match: Match
    records: list[PlayerGameRecord] = field(default_factory=list)


@dataclass
class IngestResult:
    """Outcome of normalizing one team's matches.

    Attributes:
        team: Team-season the matches belong to.
        matches: Successfully normalized matches, in input order.
        failures: (match_id, reason) for each match that was skipped.
    """

    team: TeamSeason
    matches: list[NormalizedMatch] = field(default_factory=list)
    failures: list[tuple[MatchId, str]] = field(default_factory=list)

    @property
    def records(self) -> list[PlayerGameRecord]:
        """All records across matches, in match order."""
        return [record for item in self.matches for record in item.records]


def reconstruct_game_records(
    match: Match,
    pairings: Iterable[GamePairing],
    player_id: PlayerId | None,
    team: TeamSeason,
) -> list[PlayerGameRecord]:
    """Replay a match's games and emit the tracked player's records.

    Pairings are consumed in the order given, which must be positional
    order; the running counters make the result order-sensitive.

    Args:
        match: Match the games belong to.
        pairings: Games of the match in positional order.
        player_id: Tracked player's id on this team.
        team: Team-season the tracked player played for.

    Returns:
        One record per game involving the tracked player.
    """
    score = RunningScore()
    records: list[PlayerGameRecord] = []

    for pairing in pairings:
        is_home = player_id is not None and pairing.home.player_id == player_id
        is_away = player_id is not None and pairing.away.player_id == player_id

        if not is_home and not is_away:
            score.record_game(pairing.home.score, pairing.away.score)
            continue

        player, opponent = (
            (pairing.home, pairing.away) if is_home else (pairing.away, pairing.home)
        )

        records.append(
            PlayerGameRecord(
                match_id=match.id,
                date=match.date,
                is_win=player.score > opponent.score,
                player_skill=player.skill_level,
                opponent_skill=opponent.skill_level,
                skill_difference=player.skill_level - opponent.skill_level,
                position=pairing.position,
                location=match.location or UNKNOWN_NAME,
                team_situation=score.situation_for(is_home),
                is_home=is_home,
                player_score=player.score,
                opponent_score=opponent.score,
                opponent_name=opponent.name or UNKNOWN_NAME,
                team_id=team.id,
                team_name=team.name,
                team_type=team.type,
                season_key=team.session_key,
                innings=player.innings,
                defensive_shots=player.defensive_shots,
            )
        )

        score.record_game(pairing.home.score, pairing.away.score)

    return records


class MatchStreamNormalizer:
    """Normalizes one team's match details for one tracked player.

    Attributes:
        team: Team-season being normalized.
        player_id: Tracked player's id on this team.
    """

    def __init__(self, team: TeamSeason, player_id: PlayerId | None) -> None:
        self.team = team
        self.player_id = player_id

    def normalize_match(self, raw: RawPayload | ProviderMatchDetails) -> NormalizedMatch:
        """Normalize a single match.

        Args:
            raw: Match details payload.

        Returns:
            The mapped Match and the tracked player's records.

        Raises:
            PartialIngestFailure: If the payload is malformed.
        """
        match_id = _payload_id(raw)
        try:
            details = (
                raw
                if isinstance(raw, ProviderMatchDetails)
                else ProviderMatchDetails.model_validate(raw)
            )
            match = match_from_provider(details)
            pairings = pairings_from_provider(details, self.team.type)
        except (ValidationError, ValueError, TypeError) as e:
            raise PartialIngestFailure(match_id, str(e)) from e

        records = reconstruct_game_records(match, pairings, self.player_id, self.team)
        return NormalizedMatch(match=match, records=records)

    def normalize_matches(
        self,
        payloads: Iterable[RawPayload | ProviderMatchDetails],
    ) -> IngestResult:
        """Normalize a team's matches, skipping the ones that fail.

        Args:
            payloads: Match details payloads, in provider order.

        Returns:
            IngestResult with normalized matches and per-match failures.
        """
        result = IngestResult(team=self.team)

        for raw in payloads:
            try:
                result.matches.append(self.normalize_match(raw))
            except PartialIngestFailure as e:
                logger.warning(f"{WARN} {e}")
                result.failures.append((e.match_id, e.reason))

        logger.info(
            f"{SUCCESS} Team {{}} ({{}}): {{}} matches, {{}} games, {{}} skipped",
            self.team.name,
            self.team.session_key,
            len(result.matches),
            len(result.records),
            len(result.failures),
        )
        return result


def _payload_id(raw: RawPayload | ProviderMatchDetails) -> MatchId:
    if isinstance(raw, ProviderMatchDetails):
        return raw.id
    if isinstance(raw, dict) and raw.get("id") is not None:
        return str(raw["id"])
    return "unknown"
