"""
Group stage fixtures - group assignment and the round-robin schedule
"""
import logging
from typing import Optional

from cricket_cup.config import settings
from cricket_cup.engine.exceptions import TournamentSetupError
from cricket_cup.models.bracket import BracketConfig, GROUP_SIZE
from cricket_cup.models.match import Match, GROUP_STAGE
from cricket_cup.models.team import Team
from cricket_cup.stores import MatchStore, TeamStore, BracketConfigStore, MatchSpec

logger = logging.getLogger(__name__)

# Slot pairings for a 4-team group, spread so nobody plays twice in a row
ROUND_ROBIN_ORDER = [(0, 1), (2, 3), (0, 2), (1, 3), (0, 3), (1, 2)]


def round_robin_pairs(group: list[int]) -> list[tuple[int, int]]:
    """The six pairings of a full 4-team group"""
    if len(group) != GROUP_SIZE:
        raise TournamentSetupError(f"A group needs {GROUP_SIZE} teams, got {len(group)}")
    return [(group[i], group[j]) for i, j in ROUND_ROBIN_ORDER]


def assign_groups(teams: list[Team]) -> BracketConfig:
    """First four teams to group A, next four to group B"""
    if len(teams) < GROUP_SIZE * 2:
        raise TournamentSetupError(f"Need at least {GROUP_SIZE * 2} teams for the tournament, found {len(teams)}")
    return BracketConfig(
        group_a=[team.id for team in teams[:GROUP_SIZE]],
        group_b=[team.id for team in teams[GROUP_SIZE:GROUP_SIZE * 2]],
    )


def group_stage_specs(config: BracketConfig, teams: list[Team], total_balls_per_team: int) -> list[MatchSpec]:
    if not config.is_complete:
        raise TournamentSetupError("Both groups need four distinct teams before fixtures can be made")

    roster = {team.id: team for team in teams}
    specs = []
    for group in (config.group_a, config.group_b):
        for team1_id, team2_id in round_robin_pairs(group):
            team1, team2 = roster[team1_id], roster[team2_id]
            specs.append(MatchSpec(
                team1_id=team1.id,
                team2_id=team2.id,
                team1_name=team1.name,
                team2_name=team2.name,
                match_type=GROUP_STAGE,
                total_balls_per_team=total_balls_per_team,
            ))
    return specs


def start_tournament(
    match_store: MatchStore,
    team_store: TeamStore,
    config_store: BracketConfigStore,
    config: Optional[BracketConfig] = None,
    reset: bool = False,
    total_balls_per_team: Optional[int] = None,
) -> tuple[BracketConfig, list[Match]]:
    """
    Assign the groups and schedule all 12 group matches as upcoming.

    Without an explicit config the first eight teams are used. With reset,
    every existing match is deleted first; this is an operator action and
    never part of automatic progression.
    """
    teams = team_store.list_teams()
    if config is None:
        config = assign_groups(teams)

    missing = [team_id for team_id in config.all_teams if team_id not in {t.id for t in teams}]
    if missing:
        raise TournamentSetupError(f"Unknown team(s) in groups: {missing}")

    balls = total_balls_per_team or settings.DEFAULT_BALLS_PER_TEAM
    specs = group_stage_specs(config, teams, balls)

    existing = match_store.list_matches()
    if existing and not reset:
        raise TournamentSetupError(
            f"{len(existing)} match(es) already exist; start with reset to clear them"
        )

    # Config, deletions and new fixtures land in one commit or not at all
    config = config_store.set_bracket_config(config, commit=False)
    matches = match_store.replace_matches(specs)
    if existing:
        logger.warning("Deleted %s existing match(es) before starting the tournament", len(existing))
    logger.info("Tournament started: %s group matches scheduled", len(matches))
    return config, matches
