"""CLI entrypoint using Typer.

This module defines the command-line interface for season wrapped. Both
commands read exported provider payloads from a data directory (see
season_wrapped.data.provider.JsonProviderClient).

Example:
    $ season-wrapped --help
    $ season-wrapped report 12345 --season "Fall 2025"
    $ season-wrapped wrapped 12345 --year 2025 --json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from season_wrapped import __version__
from season_wrapped.config import get_settings
from season_wrapped.logging import setup_logging
from season_wrapped.types import SeasonWrappedError

# Initialize console for rich output
console = Console()

# Create main app
app = typer.Typer(
    name="season-wrapped",
    help="Pool league season analytics and season wrapped recaps",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]season-wrapped[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-V",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """Pool league season analytics.

    Builds a multi-dimensional season report or a narrative season wrapped
    recap from a player's match history.
    """
    setup_logging(level="DEBUG" if verbose else None)


def _client(data_dir: Path | None):
    from season_wrapped.data.provider import JsonProviderClient

    settings = get_settings()
    return JsonProviderClient(data_dir or settings.provider_data_dir_obj)


def _fail(error: Exception) -> typer.Exit:
    console.print(f"[red]Error: {error}[/red]")
    return typer.Exit(1)


# =============================================================================
# Report Command
# =============================================================================


@app.command("report")
def report(
    player_id: Annotated[str, typer.Argument(help="Provider player id")],
    season: Annotated[
        str | None,
        typer.Option(
            "--season",
            "-s",
            help='Restrict to one season, e.g. "Fall 2025" (default: all seasons)',
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the report as JSON"),
    ] = False,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", "-d", help="Directory of exported provider data"),
    ] = None,
) -> None:
    """Show a player's season report.

    Breaks down wins and losses by team, season, opponent, position,
    location, score, skill, innings and team situation.
    """
    from season_wrapped.data.seasons import season_predicate
    from season_wrapped.pipeline import build_season_report

    try:
        predicate = season_predicate(season) if season else None
        season_report = build_season_report(
            player_id, _client(data_dir), predicate, season
        )
    except SeasonWrappedError as e:
        raise _fail(e) from e

    if as_json:
        typer.echo(json.dumps(season_report.to_dict(), indent=2))
        return

    console.print(
        Panel(
            f"[bold]Record:[/bold] {season_report.overall_wins}-"
            f"{season_report.overall_losses} "
            f"({season_report.win_percentage}%)\n"
            f"[bold]Games:[/bold] {season_report.total_matches}\n"
            f"[bold]Teams:[/bold] {season_report.total_teams}",
            title=f"Season Report: {season or 'All Seasons'}",
        )
    )

    for name, buckets in season_report.dimensions().items():
        if not buckets:
            continue
        table = Table(title=name.replace("_", " ").title())
        table.add_column("Key", style="cyan")
        table.add_column("W", justify="right")
        table.add_column("L", justify="right")
        table.add_column("Win %", justify="right", style="green")
        for key, bucket in buckets.items():
            table.add_row(
                str(key), str(bucket.wins), str(bucket.losses), f"{bucket.win_percentage}"
            )
        console.print(table)


# =============================================================================
# Wrapped Command
# =============================================================================


@app.command("wrapped")
def wrapped(
    player_id: Annotated[str, typer.Argument(help="Provider player id")],
    season: Annotated[
        str | None,
        typer.Option("--season", "-s", help='Season to recap, e.g. "Fall 2025"'),
    ] = None,
    year: Annotated[
        int | None,
        typer.Option("--year", "-y", help="Recap Spring, Summer and Fall of a year"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the slides as JSON"),
    ] = False,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", "-d", help="Directory of exported provider data"),
    ] = None,
) -> None:
    """Build a player's season wrapped recap.

    Without --season or --year the configured default season is used.
    """
    from season_wrapped.pipeline import (
        compute_wrapped,
        compute_wrapped_for_season,
        compute_wrapped_for_year,
    )

    if season and year is not None:
        console.print("[red]Error: Specify --season or --year, not both[/red]")
        raise typer.Exit(1)

    client = _client(data_dir)
    try:
        if year is not None:
            slides = compute_wrapped_for_year(player_id, client, year)
        elif season:
            slides = compute_wrapped_for_season(player_id, client, season)
        else:
            slides = compute_wrapped(player_id, client)
    except SeasonWrappedError as e:
        raise _fail(e) from e

    if as_json:
        typer.echo(json.dumps([slide.to_dict() for slide in slides], indent=2))
        return

    for slide in slides:
        console.print(Panel(_render_slide(slide), title=slide.type.replace("_", " ").title()))


def _render_slide(slide) -> str:
    """Render one slide as console markup."""
    data = slide.to_dict()
    kind = data["type"]

    if kind == "welcome":
        return f"You played [bold]{data['total_games']}[/bold] games this season"

    if kind == "record_summary":
        return (
            f"[bold]Record:[/bold] {data['wins']}-{data['losses']} "
            f"({data['win_percentage']}%)\n"
            f"[bold]Skill:[/bold] {data['starting_skill']} -> {data['ending_skill']} "
            f"(peak {data['highest_skill']})\n"
            f"[bold]Longest win streak:[/bold] {data['longest_win_streak']}"
        )

    if kind == "team_breakdown":
        lines = [
            f"{team['team_name']} ({team['season_key']}): "
            f"{team['wins']}-{team['losses']} ({team['win_percentage']}%)"
            for team in data["teams"]
        ]
        lines.append(f"[bold]Best team:[/bold] {data['best_team']['team_name']}")
        return "\n".join(lines)

    if kind == "location_position_breakdown":
        best, worst = data["best_location"], data["worst_location"]
        return (
            f"[bold]Best location:[/bold] {best['location']} ({best['win_percentage']}%)\n"
            f"[bold]Worst location:[/bold] {worst['location']} ({worst['win_percentage']}%)\n"
            f"[bold]Best position:[/bold] {data['best_position']['position']} "
            f"({data['best_position']['win_percentage']}%)\n"
            f"[bold]Worst position:[/bold] {data['worst_position']['position']} "
            f"({data['worst_position']['win_percentage']}%)"
        )

    if kind == "rivals":
        lines = [
            f"{row['opponent_name']}: {row['wins']}-{row['losses']} "
            f"in {row['total_matches']} games"
            for row in data["most_played"]
        ]
        lines.append(f"[bold]Season opener:[/bold] {data['season_opener']['opponent_name']}")
        lines.append(f"[bold]Season closer:[/bold] {data['season_closer']['opponent_name']}")
        return "\n".join(lines)

    if kind == "archetypes":
        return "\n".join(
            f"[bold]{row['name']}[/bold] {row['score']}: {row['explanation']}"
            for row in data["top"]
        ) or "No archetypes"

    lines = [f"- {line}" for line in data["highlights"]]
    lines.append(data["fun_stat"])
    return "\n".join(lines)
