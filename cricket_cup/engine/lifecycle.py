"""
Match Lifecycle - status transitions, the single-live-match rule and score mutations
"""
import logging
import threading
from datetime import datetime
from typing import Optional

from cricket_cup.config import settings
from cricket_cup.engine.exceptions import InvalidTransitionError, InvalidMatchError
from cricket_cup.engine.result import is_match_complete, final_result, live_result
from cricket_cup.engine.score import Innings, Side, add_runs, add_wickets, add_balls
from cricket_cup.models.match import Match, MatchStatus, ScoreEvent, GROUP_STAGE
from cricket_cup.stores import MatchStore, TeamStore

logger = logging.getLogger(__name__)

# Serialises every transition into live across controllers in the process
_live_lock = threading.RLock()


class MatchLifecycleController:
    """
    Mediates every status change and score mutation.

    Lifecycle is upcoming -> live -> completed. Only one match may be live:
    starting a match force-completes whichever match was live before it.
    Score actions are accepted only on the live match and are clamped
    before they reach the store.
    """

    def __init__(self, match_store: MatchStore, team_store: TeamStore, default_balls_per_team: Optional[int] = None):
        self.matches = match_store
        self.teams = team_store
        self.default_balls_per_team = default_balls_per_team or settings.DEFAULT_BALLS_PER_TEAM

    # ---------- Creation ----------

    def create_match(
        self,
        team1_id: int,
        team2_id: int,
        match_type: str = GROUP_STAGE,
        total_balls_per_team: Optional[int] = None,
        date: Optional[datetime] = None,
    ) -> Match:
        """Manually schedule a match as upcoming"""
        if team1_id == team2_id:
            raise InvalidMatchError("A team cannot play itself")

        balls = total_balls_per_team if total_balls_per_team is not None else self.default_balls_per_team
        if balls <= 0:
            raise InvalidMatchError(f"Balls per team must be positive, got {balls}")

        roster = {team.id: team for team in self.teams.list_teams()}
        missing = [team_id for team_id in (team1_id, team2_id) if team_id not in roster]
        if missing:
            raise InvalidMatchError(f"Unknown team(s): {', '.join(str(t) for t in missing)}")

        team1, team2 = roster[team1_id], roster[team2_id]
        return self.matches.create_match(
            team1.id, team2.id, team1.name, team2.name, match_type, balls, date
        )

    # ---------- Status transitions ----------

    def start_match(self, match_id: int) -> Match:
        with _live_lock:
            match = self.matches.get_match(match_id)
            if match.status != MatchStatus.UPCOMING:
                raise InvalidTransitionError(
                    f"Only an upcoming match can be started; match #{match_id} is {match.status.value}"
                )
            match = self.matches.set_live(match_id, expected=MatchStatus.UPCOMING)
        logger.info("Match #%s is live: %s vs %s", match_id, match.team1_name, match.team2_name)
        return match

    def complete_match(self, match_id: int) -> Match:
        """Explicit operator completion; the result is finalised from the scores"""
        match = self._live_match(match_id)
        result = final_result(match.team1_score, match.team2_score, match.team1_name, match.team2_name)
        logger.info("Match #%s completed by operator: %s", match_id, result)
        return self.matches.update_match_score(match_id, status=MatchStatus.COMPLETED, result=result)

    def reopen_match(self, match_id: int) -> Match:
        """Operator override: put a completed match back to live"""
        with _live_lock:
            match = self.matches.get_match(match_id)
            if match.status != MatchStatus.COMPLETED:
                raise InvalidTransitionError(
                    f"Only a completed match can be reopened; match #{match_id} is {match.status.value}"
                )
            result = live_result(match.team1_score, match.team2_score, match.team1_name, match.team2_name)
            match = self.matches.set_live(match_id, expected=MatchStatus.COMPLETED, result=result)
        logger.warning("Match #%s reopened by operator", match_id)
        return match

    def set_status(self, match_id: int, status: MatchStatus) -> Match:
        """Route a requested status onto the matching transition"""
        match = self.matches.get_match(match_id)
        if match.status == status:
            return match

        transitions = {
            (MatchStatus.UPCOMING, MatchStatus.LIVE): self.start_match,
            (MatchStatus.LIVE, MatchStatus.COMPLETED): self.complete_match,
            (MatchStatus.COMPLETED, MatchStatus.LIVE): self.reopen_match,
        }
        transition = transitions.get((match.status, status))
        if transition is None:
            raise InvalidTransitionError(
                f"Cannot move match #{match_id} from {match.status.value} to {status.value}"
            )
        return transition(match_id)

    # ---------- Score mutations ----------

    def _live_match(self, match_id: int) -> Match:
        match = self.matches.get_match(match_id)
        if match.status != MatchStatus.LIVE:
            raise InvalidTransitionError(
                f"Scores can only change while a match is live; match #{match_id} is {match.status.value}"
            )
        return match

    def _persist(
        self,
        match: Match,
        changes: dict[Side, Innings],
        action: str,
        delta: int,
        correction: bool = False,
    ) -> Match:
        """
        Write the changed innings, the recomputed result and one score event
        per changed side in a single store call. Corrections never re-check
        completion.
        """
        total = match.total_balls_per_team
        changes = {side: innings.clamped(total) for side, innings in changes.items()}
        team1 = changes.get(Side.TEAM1, match.team1_score)
        team2 = changes.get(Side.TEAM2, match.team2_score)

        status = None
        if not correction and is_match_complete(team1, team2, total):
            status = MatchStatus.COMPLETED
            result = final_result(team1, team2, match.team1_name, match.team2_name)
            logger.info("Match #%s completed: %s", match.id, result)
        else:
            result = live_result(team1, team2, match.team1_name, match.team2_name)

        events = [
            ScoreEvent(side=side, action=action, delta=delta, previous=match.score_for(side))
            for side in changes
        ]
        return self.matches.update_match_score(
            match.id,
            team1_score=changes.get(Side.TEAM1),
            team2_score=changes.get(Side.TEAM2),
            status=status,
            result=result,
            events=events,
        )

    def _apply(self, match: Match, side: Side, innings: Innings, action: str, delta: int, correction: bool = False) -> Match:
        return self._persist(match, {side: innings}, action, delta, correction)

    def add_runs(self, match_id: int, side: Side, delta: int = 1) -> Match:
        """A negative delta is the "-1" correction"""
        match = self._live_match(match_id)
        innings = add_runs(match.score_for(side), delta)
        return self._apply(match, side, innings, "runs", delta, correction=delta < 0)

    def add_wicket(self, match_id: int, side: Side) -> Match:
        match = self._live_match(match_id)
        innings = add_wickets(match.score_for(side), 1)
        return self._apply(match, side, innings, "wicket", 1)

    def undo_wicket(self, match_id: int, side: Side) -> Match:
        match = self._live_match(match_id)
        innings = add_wickets(match.score_for(side), -1)
        return self._apply(match, side, innings, "wicket", -1, correction=True)

    def add_ball(self, match_id: int, side: Side) -> Match:
        match = self._live_match(match_id)
        innings = add_balls(match.score_for(side), 1, match.total_balls_per_team)
        return self._apply(match, side, innings, "ball", 1)

    def undo_ball(self, match_id: int, side: Side) -> Match:
        match = self._live_match(match_id)
        innings = add_balls(match.score_for(side), -1, match.total_balls_per_team)
        return self._apply(match, side, innings, "ball", -1, correction=True)

    def update_score(
        self,
        match_id: int,
        team1_score: Optional[Innings] = None,
        team2_score: Optional[Innings] = None,
    ) -> Match:
        """Replace one or both innings outright (values are clamped)"""
        match = self._live_match(match_id)
        changes = {}
        if team1_score is not None:
            changes[Side.TEAM1] = team1_score
        if team2_score is not None:
            changes[Side.TEAM2] = team2_score
        if not changes:
            return match
        return self._persist(match, changes, "score", 0)

    def undo_last(self, match_id: int, side: Side) -> Match:
        """Restore the side's innings to what it was before its latest action"""
        match = self._live_match(match_id)
        event = self.matches.pop_event(match_id, side)
        if event is None:
            raise InvalidTransitionError(f"Nothing to undo for {side.value} in match #{match_id}")

        restored = event.previous
        team1 = restored if side == Side.TEAM1 else match.team1_score
        team2 = restored if side == Side.TEAM2 else match.team2_score
        logger.info("Undid %s %s on match #%s", side.value, event.action, match_id)
        return self.matches.update_match_score(
            match_id,
            team1_score=team1 if side == Side.TEAM1 else None,
            team2_score=team2 if side == Side.TEAM2 else None,
            result=live_result(team1, team2, match.team1_name, match.team2_name),
        )
