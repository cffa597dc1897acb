"""
Result generation and match completion detection
"""
from cricket_cup.engine.score import Innings, MAX_WICKETS, Side

TIED = "Match tied"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def generate_result(team1_score: Innings, team2_score: Innings, team1_name: str, team2_name: str) -> str:
    """
    Human-readable outcome for the current scores.

    Team 2 is always the chasing side, so a team 2 win is framed in
    wickets remaining and a team 1 win in runs.
    """
    team1_runs = team1_score.runs
    team2_runs = team2_score.runs

    if team1_runs == 0 and team2_runs == 0:
        return ""

    if team2_runs == 0:
        return f"{team1_name} batting..."

    if team1_runs > team2_runs:
        return f"{team1_name} won by {_plural(team1_runs - team2_runs, 'run')}"

    if team2_runs > team1_runs:
        return f"{team2_name} won by {_plural(MAX_WICKETS - team2_score.wickets, 'wicket')}"

    return TIED


def is_innings_finished(innings: Innings, total_balls_per_team: int) -> bool:
    """Innings ends when the ball allotment is used up or the side is all out"""
    return innings.balls >= total_balls_per_team or innings.wickets >= MAX_WICKETS


def is_match_complete(team1_score: Innings, team2_score: Innings, total_balls_per_team: int) -> bool:
    """A successful chase ends the match at once; otherwise the second innings must finish"""
    if team2_score.runs > team1_score.runs:
        return True
    return is_innings_finished(team2_score, total_balls_per_team)


def final_result(team1_score: Innings, team2_score: Innings, team1_name: str, team2_name: str) -> str:
    """Verdict written when a match completes (never a progress string)"""
    if team1_score.runs > team2_score.runs:
        return f"{team1_name} won by {_plural(team1_score.runs - team2_score.runs, 'run')}"
    if team2_score.runs > team1_score.runs:
        return f"{team2_name} won by {_plural(MAX_WICKETS - team2_score.wickets, 'wicket')}"
    return TIED


def live_result(team1_score: Innings, team2_score: Innings, team1_name: str, team2_name: str) -> str:
    """
    Result shown while a match is still live.

    A verdict is held back until the match completes: a chase in progress
    reads as the chasing side batting, which also keeps a level score from
    being called a tie before the second innings is finished.
    """
    result = generate_result(team1_score, team2_score, team1_name, team2_name)
    if team2_score.runs > 0:
        return f"{team2_name} batting..."
    return result


def winner_side(team1_score: Innings, team2_score: Innings) -> Side:
    """Team 1 only on strictly more runs, team 2 otherwise (including a tie)"""
    return Side.TEAM1 if team1_score.runs > team2_score.runs else Side.TEAM2
