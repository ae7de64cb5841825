"""End-to-end season report and season wrapped pipelines.

Orchestrates the flow from a provider client to a report or slide
sequence:

    memberships -> team-seasons -> season selection -> per-team match fetch
    -> normalization -> aggregation / archetypes -> composition

Fetching is the only I/O; it happens once per team and once per match
before any of the pure computation runs. A match that cannot be fetched or
normalized is logged and skipped.

Example:
    >>> from season_wrapped.data import JsonProviderClient
    >>> from season_wrapped.pipeline import compute_wrapped_for_season
    >>> client = JsonProviderClient("data/provider")
    >>> slides = compute_wrapped_for_season("12345", client, "Fall 2025")
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Mapping, Sequence

from pydantic import ValidationError

from season_wrapped.config import Settings, get_settings
from season_wrapped.data.models import (
    PlayerGameRecord,
    TeamSeason,
    player_ids_by_team,
    team_season_from_provider,
)
from season_wrapped.data.normalizer import MatchStreamNormalizer
from season_wrapped.data.provider import ProviderMatchDetails, ProviderScheduledMatch
from season_wrapped.data.seasons import (
    SeasonPredicate,
    season_predicate,
    select_team_seasons,
    sort_team_seasons,
    year_predicate,
)
from season_wrapped.logging import FAIL, SUCCESS, WARN, get_logger
from season_wrapped.output.composer import compose_slides
from season_wrapped.stats.aggregation import SeasonReport, build_report
from season_wrapped.types import (
    InsufficientDataError,
    InvalidSeasonFormatError,
    MatchId,
    NotFoundError,
    PlayerId,
    RawPayload,
    TeamId,
)

if TYPE_CHECKING:
    from season_wrapped.output.slides import Slide
    from season_wrapped.types import ProviderClient

logger = get_logger(__name__)

MatchPayload = RawPayload | ProviderMatchDetails


@dataclass
class SeasonData:
    """Everything fetched from the provider for one player.

    Attributes:
        teams: Selected team-seasons, with match ids populated.
        matches_by_team: Match detail payloads per team id.
        player_id_by_team: Tracked player's id per team id.
        fetch_failures: (match_id, reason) for matches that could not be fetched.
    """

    teams: list[TeamSeason] = field(default_factory=list)
    matches_by_team: dict[TeamId, list[MatchPayload]] = field(default_factory=dict)
    player_id_by_team: dict[TeamId, PlayerId] = field(default_factory=dict)
    fetch_failures: list[tuple[MatchId, str]] = field(default_factory=list)


# =============================================================================
# Fetching
# =============================================================================


def load_team_seasons(
    player_id: PlayerId,
    client: ProviderClient,
) -> tuple[list[TeamSeason], dict[TeamId, PlayerId]]:
    """Fetch and map a player's team memberships.

    Memberships that fail validation or carry an unparseable session name
    are skipped with a warning.

    Returns:
        Team-seasons in chronological order and the player's id per team.
    """
    memberships = client.list_team_seasons(player_id)
    teams: list[TeamSeason] = []
    valid: list[RawPayload] = []
    for raw in memberships:
        try:
            teams.append(team_season_from_provider(raw))
        except (ValidationError, InvalidSeasonFormatError) as e:
            logger.warning(f"{WARN} Skipping membership for player {player_id}: {e}")
            continue
        valid.append(raw)

    logger.info("Player {}: {} team-seasons", player_id, len(teams))
    return sort_team_seasons(teams), player_ids_by_team(valid, teams)


def fetch_team_matches(
    team: TeamSeason,
    client: ProviderClient,
    failures: list[tuple[MatchId, str]] | None = None,
) -> tuple[TeamSeason, list[RawPayload]]:
    """Fetch a team's played matches and their details.

    Args:
        team: Team-season to fetch.
        client: Provider client.
        failures: Collects (match_id, reason) for matches whose details
            could not be fetched.

    Returns:
        The team-season carrying its match ids, and the match details.
    """
    scheduled = [
        ProviderScheduledMatch.model_validate(raw)
        for raw in client.list_matches_for_team(team.external_id)
    ]
    match_ids = [entry.id for entry in scheduled if entry.id is not None]
    team = team.with_match_ids(match_ids)

    details: list[RawPayload] = []
    for match_id in match_ids:
        try:
            details.append(client.get_match_details(match_id))
        except Exception as e:
            logger.warning(f"{WARN} Match {match_id}: could not fetch details: {e}")
            if failures is not None:
                failures.append((match_id, str(e)))

    logger.debug(
        "Team {} ({}): fetched {} of {} matches",
        team.name,
        team.session_key,
        len(details),
        len(match_ids),
    )
    return team, details


def fetch_season_data(
    player_id: PlayerId,
    client: ProviderClient,
    predicate: SeasonPredicate | None = None,
    label: str | None = None,
    select: bool = True,
) -> SeasonData:
    """Select a player's team-seasons and fetch their matches.

    Args:
        player_id: Provider player id.
        client: Provider client.
        predicate: Season filter; the default season when omitted.
        label: Name of the selection used in the not-found message.
        select: When False, every team-season is kept and predicate is ignored.

    Raises:
        NotFoundError: If no team-seasons remain after selection.
    """
    teams, player_id_by_team = load_team_seasons(player_id, client)
    if select:
        teams = select_team_seasons(teams, predicate, label)
    elif not teams:
        raise NotFoundError(f"No teams found for player {player_id}")

    data = SeasonData(player_id_by_team=player_id_by_team)
    for team in teams:
        team, details = fetch_team_matches(team, client, data.fetch_failures)
        data.teams.append(team)
        data.matches_by_team[team.id] = list(details)
    return data


# =============================================================================
# Computation
# =============================================================================


def collect_records(
    teams: Sequence[TeamSeason],
    matches_by_team: Mapping[TeamId, Iterable[MatchPayload]],
    player_id_by_team: Mapping[TeamId, PlayerId],
) -> list[PlayerGameRecord]:
    """Normalize every team's matches into one record list, in team order."""
    records: list[PlayerGameRecord] = []
    for team in teams:
        player_id = player_id_by_team.get(team.id)
        if player_id is None:
            logger.warning(f"{WARN} No player id for team {team.name}; no games counted")
        normalizer = MatchStreamNormalizer(team, player_id)
        result = normalizer.normalize_matches(matches_by_team.get(team.id, []))
        records.extend(result.records)
    return records


def compute_season_report(
    teams: Sequence[TeamSeason],
    matches_by_team: Mapping[TeamId, Iterable[MatchPayload]],
    player_id_by_team: Mapping[TeamId, PlayerId],
) -> SeasonReport:
    """Compute the full multi-dimensional report for already-fetched data.

    Args:
        teams: Team-seasons to include.
        matches_by_team: Match detail payloads per team id.
        player_id_by_team: Tracked player's id per team id.

    Returns:
        SeasonReport over every game the player took part in.
    """
    records = collect_records(teams, matches_by_team, player_id_by_team)
    return build_report(records, total_teams=len(teams))


def build_season_report(
    player_id: PlayerId,
    client: ProviderClient,
    predicate: SeasonPredicate | None = None,
    label: str | None = None,
) -> SeasonReport:
    """Fetch a player's data and compute the season report.

    Without a predicate every team-season the player has is included.

    Raises:
        NotFoundError: If the player has no (matching) team-seasons.
    """
    data = fetch_season_data(
        player_id, client, predicate, label, select=predicate is not None
    )
    report = compute_season_report(
        data.teams, data.matches_by_team, data.player_id_by_team
    )
    logger.info(
        f"{SUCCESS} Report for player {{}}: {{}} games, {{}} teams",
        player_id,
        report.total_matches,
        report.total_teams,
    )
    return report


def compute_wrapped(
    player_id: PlayerId,
    client: ProviderClient,
    predicate: SeasonPredicate | None = None,
    label: str | None = None,
    settings: Settings | None = None,
) -> list[Slide]:
    """Build the season wrapped slide sequence for a player.

    Args:
        player_id: Provider player id.
        client: Provider client.
        predicate: Season filter; the configured default season when omitted.
        label: Name of the selection, used in error messages.
        settings: Thresholds and defaults; the global settings when omitted.

    Returns:
        Slides in presentation order.

    Raises:
        NotFoundError: If no team-seasons match.
        InsufficientDataError: If fewer than the minimum games were played.
    """
    settings = settings or get_settings()
    if predicate is None:
        label = settings.wrapped_season_label
        predicate = season_predicate(label)
    log = get_logger(__name__, player_id=player_id)

    try:
        data = fetch_season_data(player_id, client, predicate, label)
        records = collect_records(
            data.teams, data.matches_by_team, data.player_id_by_team
        )
        slides = compose_slides(
            records,
            data.teams,
            min_games=settings.wrapped_min_games,
            top_archetypes=settings.wrapped_top_archetypes,
            max_highlights=settings.wrapped_max_highlights,
            context=label or "",
        )
    except (NotFoundError, InsufficientDataError) as e:
        log.error(f"{FAIL} Player {player_id}: {e}")
        raise

    log.info(
        f"{SUCCESS} Wrapped for player {{}}: {{}} games, {{}} slides",
        player_id,
        len(records),
        len(slides),
    )
    return slides


def compute_wrapped_for_season(
    player_id: PlayerId,
    client: ProviderClient,
    season: str,
    settings: Settings | None = None,
) -> list[Slide]:
    """Season wrapped for one 'Season Year' label, e.g. 'Fall 2025'.

    Raises:
        InvalidSeasonFormatError: If the label does not parse.
    """
    season = season.strip()
    return compute_wrapped(
        player_id, client, season_predicate(season), season, settings
    )


def compute_wrapped_for_year(
    player_id: PlayerId,
    client: ProviderClient,
    year: int,
    settings: Settings | None = None,
) -> list[Slide]:
    """Season wrapped over Spring, Summer and Fall of one year."""
    return compute_wrapped(player_id, client, year_predicate(year), str(year), settings)
