from cricket_cup.engine.score import Innings, Side, MAX_WICKETS
from cricket_cup.engine.result import generate_result, is_innings_finished, is_match_complete
from cricket_cup.engine.exceptions import TournamentError

__all__ = [
    "Innings",
    "Side",
    "MAX_WICKETS",
    "generate_result",
    "is_innings_finished",
    "is_match_complete",
    "TournamentError",
]
