"""
Wires the stores and engine components around one database session
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from cricket_cup.engine.bracket import BracketProgressionMonitor
from cricket_cup.engine.lifecycle import MatchLifecycleController
from cricket_cup.stores import TeamStore, MatchStore, BracketConfigStore


@dataclass
class Tournament:
    teams: TeamStore
    matches: MatchStore
    config: BracketConfigStore
    lifecycle: MatchLifecycleController
    monitor: BracketProgressionMonitor


def build_tournament(session: Session, tournament_id: Optional[str] = None, watch: bool = True) -> Tournament:
    """
    With watch, the progression monitor is subscribed to the match store so
    every committed change re-checks the bracket.
    """
    teams = TeamStore(session)
    matches = MatchStore(session, tournament_id)
    config = BracketConfigStore(session, tournament_id)
    monitor = BracketProgressionMonitor(matches, teams, config)
    if watch:
        monitor.attach()
    return Tournament(
        teams=teams,
        matches=matches,
        config=config,
        lifecycle=MatchLifecycleController(matches, teams),
        monitor=monitor,
    )
