#!/usr/bin/env python3
"""
CLI for running a Cricket Cup tournament from the terminal
"""
import logging
import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from cricket_cup.config import settings
from cricket_cup.database import init_db, get_session
from cricket_cup.engine.exceptions import TournamentError
from cricket_cup.engine.fixtures import start_tournament
from cricket_cup.engine.score import Side
from cricket_cup.engine.standings import group_standings
from cricket_cup.generators import TeamGenerator
from cricket_cup.models.match import MatchStatus
from cricket_cup.services import build_tournament

console = Console()

STATUS_STYLES = {"upcoming": "blue", "live": "bold red", "completed": "green"}


@click.group()
@click.option("--verbose", is_flag=True, help="Show engine log output")
def cli(verbose: bool):
    """Cricket Cup - Group and Knockout Tournament"""
    logging.basicConfig(level=logging.DEBUG if verbose else settings.LOG_LEVEL)


def _report(created) -> None:
    for match in created:
        console.print(f"[bold yellow]New fixture:[/bold yellow] {match.match_type}: {match.team1_name} vs {match.team2_name}")


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


@cli.command()
@click.option("--count", default=8, help="Number of seed teams to create")
def seed_teams(count: int):
    """Create a field of club teams"""
    init_db()
    session = get_session()
    try:
        tournament = build_tournament(session)
        created = TeamGenerator.create_teams(tournament.teams, count)
        console.print(f"[green]{len(created)} team(s) created[/green]")
    finally:
        session.close()


@cli.command("start-tournament")
@click.option("--reset", is_flag=True, help="Delete existing matches first")
@click.option("--balls", default=None, type=int, help="Balls per team for group matches")
def start_tournament_command(reset: bool, balls):
    """Assign the first 8 teams to groups and schedule the group stage"""
    if reset:
        click.confirm("This deletes ALL existing matches. Continue?", abort=True)

    session = get_session()
    try:
        tournament = build_tournament(session)
        config, matches = start_tournament(
            tournament.matches, tournament.teams, tournament.config,
            reset=reset, total_balls_per_team=balls,
        )
    except TournamentError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    finally:
        session.close()

    console.print(Panel(f"[bold]Tournament started[/bold] - {len(matches)} group matches scheduled"))


@cli.command()
def matches():
    """List all matches"""
    session = get_session()
    try:
        tournament = build_tournament(session, watch=False)
        all_matches = tournament.matches.list_matches()

        if not all_matches:
            console.print("[red]No matches found. Run 'start-tournament' first.[/red]")
            return

        table = Table(title=f"Matches ({len(all_matches)} total)")
        table.add_column("ID")
        table.add_column("Type", style="magenta")
        table.add_column("Team 1", style="cyan")
        table.add_column("Score", justify="right")
        table.add_column("Team 2", style="cyan")
        table.add_column("Score", justify="right")
        table.add_column("Status")
        table.add_column("Result")

        for match in all_matches:
            status = match.status.value
            table.add_row(
                str(match.id),
                match.match_type,
                match.team1_name,
                f"{match.team1_score.display} ({match.team1_score.balls}/{match.total_balls_per_team})",
                match.team2_name,
                f"{match.team2_score.display} ({match.team2_score.balls}/{match.total_balls_per_team})",
                f"[{STATUS_STYLES[status]}]{status}[/{STATUS_STYLES[status]}]",
                match.result or "",
            )

        console.print(table)
    finally:
        session.close()


@cli.command()
def standings():
    """Show both group tables"""
    session = get_session()
    try:
        tournament = build_tournament(session, watch=False)
        tables = group_standings(
            tournament.config.get_bracket_config(),
            tournament.matches.list_matches(),
            tournament.teams.list_teams(),
        )

        for name, rows in zip(("Group A", "Group B"), tables):
            table = Table(title=name)
            table.add_column("Pos", justify="right")
            table.add_column("Team", style="cyan")
            table.add_column("P", justify="right")
            table.add_column("W", justify="right")
            table.add_column("D", justify="right")
            table.add_column("L", justify="right")
            table.add_column("Pts", justify="right", style="green")
            table.add_column("NRR", justify="right")

            for pos, row in enumerate(rows, 1):
                table.add_row(
                    str(pos),
                    row.team.name,
                    str(row.played),
                    str(row.wins),
                    str(row.draws),
                    str(row.losses),
                    str(row.points),
                    f"{row.net_run_rate:+.3f}",
                )
            console.print(table)
    finally:
        session.close()


@cli.command()
def advance():
    """Check whether semi-finals or the final can be created"""
    session = get_session()
    try:
        tournament = build_tournament(session, watch=False)
        report = tournament.monitor.evaluate()
    except TournamentError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    finally:
        session.close()

    for issue in report.integrity_issues:
        console.print(f"[bold red]Integrity problem:[/bold red] {issue}")
    if not report.created:
        console.print("[yellow]No new fixture needed yet[/yellow]")
    _report(report.created)


@cli.command()
@click.argument("match_id", type=int)
def start(match_id: int):
    """Make an upcoming match live"""
    session = get_session()
    try:
        tournament = build_tournament(session)
        match = tournament.lifecycle.start_match(match_id)
        console.print(f"[bold red]LIVE[/bold red] {match.team1_name} vs {match.team2_name}")
    except TournamentError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    finally:
        session.close()


@cli.command()
@click.argument("match_id", type=int)
@click.argument("side", type=click.Choice([s.value for s in Side]))
@click.option("--runs", default=0, help="Runs to add (negative to correct)")
@click.option("--wicket", is_flag=True, help="Record a wicket")
@click.option("--ball", is_flag=True, help="Record a ball bowled")
@click.option("--undo", is_flag=True, help="Undo the side's latest action")
def score(match_id: int, side: str, runs: int, wicket: bool, ball: bool, undo: bool):
    """Record score actions for one side of the live match"""
    session = get_session()
    try:
        tournament = build_tournament(session)
        lifecycle = tournament.lifecycle
        batting = Side(side)
        match = tournament.matches.get_match(match_id)

        actions = []
        if undo:
            actions.append(("undo", lambda: lifecycle.undo_last(match_id, batting)))
        if runs:
            actions.append(("runs", lambda: lifecycle.add_runs(match_id, batting, runs)))
        if wicket:
            actions.append(("wicket", lambda: lifecycle.add_wicket(match_id, batting)))
        if ball:
            actions.append(("ball", lambda: lifecycle.add_ball(match_id, batting)))

        # Each action is its own commit; once the match is over the rest are not applied
        for position, (name, action) in enumerate(actions):
            match = action()
            skipped = [later for later, _ in actions[position + 1:]]
            if match.status == MatchStatus.COMPLETED and skipped:
                console.print(f"[yellow]Match ended after {name}; not applied: {', '.join(skipped)}[/yellow]")
                break

        innings = match.score_for(batting)
        console.print(f"{side}: {innings.display} ({innings.balls}/{match.total_balls_per_team})  {match.result}")
        if match.status == MatchStatus.COMPLETED:
            console.print(f"[bold green]Match completed:[/bold green] {match.result}")
    except TournamentError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    finally:
        session.close()


@cli.command()
@click.argument("match_id", type=int)
def complete(match_id: int):
    """Complete the live match with a result from the current scores"""
    session = get_session()
    try:
        tournament = build_tournament(session)
        match = tournament.lifecycle.complete_match(match_id)
        console.print(f"[bold green]Match completed:[/bold green] {match.result}")
    except TournamentError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    finally:
        session.close()


if __name__ == "__main__":
    cli()
