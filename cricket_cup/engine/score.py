"""
Score state - one side's innings and the clamped operations on it
"""
import enum
from dataclasses import dataclass, replace

MAX_WICKETS = 5


class Side(enum.Enum):
    """Which innings a score action targets"""
    TEAM1 = "team1"
    TEAM2 = "team2"


def clamp_wickets(wickets: int) -> int:
    return min(max(wickets, 0), MAX_WICKETS)


def clamp_balls(balls: int, total_balls_per_team: int) -> int:
    return min(max(balls, 0), total_balls_per_team)


@dataclass(frozen=True)
class Innings:
    """
    A team's batting record in a match.

    Values are never validated here; use clamped() or the helpers below
    at every mutation boundary so nothing out of range gets persisted.
    """
    runs: int = 0
    wickets: int = 0
    balls: int = 0

    def clamped(self, total_balls_per_team: int) -> "Innings":
        return Innings(
            runs=max(0, self.runs),
            wickets=clamp_wickets(self.wickets),
            balls=clamp_balls(self.balls, total_balls_per_team),
        )

    @property
    def display(self) -> str:
        return f"{self.runs}/{self.wickets}"

    def to_dict(self) -> dict:
        return {"runs": self.runs, "wickets": self.wickets, "balls": self.balls}


def add_runs(innings: Innings, delta: int) -> Innings:
    """Runs never touch wickets or balls - those are separate operator actions"""
    return replace(innings, runs=max(0, innings.runs + delta))


def add_wickets(innings: Innings, delta: int) -> Innings:
    return replace(innings, wickets=clamp_wickets(innings.wickets + delta))


def add_balls(innings: Innings, delta: int, total_balls_per_team: int) -> Innings:
    return replace(innings, balls=clamp_balls(innings.balls + delta, total_balls_per_team))
