"""
Standings - group tables derived from completed matches
"""
from dataclasses import dataclass
from typing import Iterable, Mapping

from cricket_cup.models.bracket import BracketConfig
from cricket_cup.models.match import Match, MatchStatus, GROUP_STAGE
from cricket_cup.models.team import Team


@dataclass
class Standing:
    """Team standing in a group table"""
    team: Team
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    points: int = 0
    net_run_rate: float = 0.0
    runs_scored: int = 0
    runs_conceded: int = 0
    balls_faced: int = 0


def _standing_for(team: Team, matches: Iterable[Match]) -> Standing:
    standing = Standing(team=team)

    for match in matches:
        if match.status != MatchStatus.COMPLETED or not match.has_team(team.id):
            continue

        if match.team1_id == team.id:
            own, opponent = match.team1_score, match.team2_score
        else:
            own, opponent = match.team2_score, match.team1_score

        standing.played += 1
        standing.runs_scored += own.runs
        standing.runs_conceded += opponent.runs
        standing.balls_faced += own.balls

        if own.runs > opponent.runs:
            standing.wins += 1
        elif own.runs == opponent.runs:
            standing.draws += 1
        else:
            standing.losses += 1

    standing.points = standing.wins * 2 + standing.draws
    if standing.balls_faced > 0:
        standing.net_run_rate = (standing.runs_scored - standing.runs_conceded) / standing.balls_faced
    return standing


def compute_standings(
    team_ids: Iterable[int],
    matches: Iterable[Match],
    teams: Mapping[int, Team],
) -> list[Standing]:
    """
    Rank teams by points (desc), then net run rate (desc).

    Teams missing from the roster (deleted after being placed in a group)
    are left out. Exact ties keep roster order, since sorted() is stable.
    """
    matches = list(matches)
    standings = [
        _standing_for(teams[team_id], matches)
        for team_id in team_ids
        if team_id in teams
    ]
    return sorted(standings, key=lambda s: (s.points, s.net_run_rate), reverse=True)


def group_stage_matches(matches: Iterable[Match], team_ids: Iterable[int]) -> list[Match]:
    """
    Completed group-stage matches between two of the given teams. Both the
    group tables and semi-final seeding read from this, so they always agree.
    """
    rostered = set(team_ids)
    return [
        m for m in matches
        if m.match_type == GROUP_STAGE
        and m.status == MatchStatus.COMPLETED
        and m.team1_id in rostered
        and m.team2_id in rostered
    ]


def group_standings(
    config: BracketConfig,
    matches: Iterable[Match],
    teams: Iterable[Team],
) -> tuple[list[Standing], list[Standing]]:
    """Both group tables, from group-stage results only"""
    roster = {team.id: team for team in teams}
    played = group_stage_matches(matches, config.all_teams)
    return (
        compute_standings(config.group_a_teams, played, roster),
        compute_standings(config.group_b_teams, played, roster),
    )
