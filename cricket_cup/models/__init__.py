from cricket_cup.models.team import Team
from cricket_cup.models.match import Match, MatchStatus, ScoreEvent
from cricket_cup.models.bracket import BracketConfig, BracketDocument

__all__ = [
    "Team",
    "Match",
    "MatchStatus",
    "ScoreEvent",
    "BracketConfig",
    "BracketDocument",
]
