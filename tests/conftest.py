"""
Shared fixtures: an in-memory database, a field of eight teams and helpers
for playing matches through the lifecycle controller.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from cricket_cup.database import Base
from cricket_cup import models  # noqa: F401 - registers the tables
from cricket_cup.engine.score import Innings
from cricket_cup.services import build_tournament
from cricket_cup.stores import TeamStore


TEAM_DATA = [
    ("Harbour Hawks", "HH"),
    ("Riverside Rangers", "RR"),
    ("Northgate Nomads", "NN"),
    ("Old Town Owls", "OTO"),
    ("Hillside Hurricanes", "HU"),
    ("Lakeview Lions", "LL"),
    ("Station Road Strikers", "SRS"),
    ("Mill Lane Mavericks", "MLM"),
]


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    session = Session(engine)
    yield session
    session.close()


@pytest.fixture
def teams(test_db):
    """Create the eight test teams (ids 1-8)."""
    store = TeamStore(test_db)
    return [store.create_team(name, short_name) for name, short_name in TEAM_DATA]


@pytest.fixture
def tournament(test_db, teams):
    """Stores and engine with the progression monitor watching the match store."""
    return build_tournament(test_db)


@pytest.fixture
def unwatched(test_db, teams):
    """Same wiring without the monitor subscribed - progression only runs when asked."""
    return build_tournament(test_db, watch=False)


def play(tournament, match_id, team1_runs, team2_runs):
    """
    Start a match and finish it with the given runs. Team 2's innings uses
    its full allotment, so the match completes whatever the margin.
    """
    match = tournament.lifecycle.start_match(match_id)
    total = match.total_balls_per_team
    return tournament.lifecycle.update_score(
        match_id,
        team1_score=Innings(runs=team1_runs, wickets=3, balls=total),
        team2_score=Innings(runs=team2_runs, wickets=2, balls=total),
    )
