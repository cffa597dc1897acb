"""
Stores - the persistence collaborators the engine reads from and writes to
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cricket_cup.config import settings
from cricket_cup.engine.exceptions import (
    StoreError, MatchNotFoundError, TeamNotFoundError, DuplicateMatchError, InvalidTransitionError
)
from cricket_cup.engine.score import Innings, Side
from cricket_cup.models.bracket import BracketConfig, BracketDocument, GROUP_SIZE
from cricket_cup.models.match import Match, MatchStatus, ScoreEvent
from cricket_cup.models.team import Team

logger = logging.getLogger(__name__)


@dataclass
class MatchSpec:
    """Everything CreateMatch needs for one fixture"""
    team1_id: int
    team2_id: int
    team1_name: str
    team2_name: str
    match_type: str
    total_balls_per_team: int
    date: datetime = field(default_factory=datetime.utcnow)


class _SessionStore:
    """Shared commit/rollback handling for the session-backed stores"""

    def __init__(self, session: Session):
        self.session = session

    def _commit(self, action: str, duplicate_knockout: bool = False) -> None:
        """
        Commit or roll back. Only knockout inserts can hit the knockout label
        index, so only they turn an integrity failure into DuplicateMatchError.
        """
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.error("Store rejected %s: %s", action, e.orig)
            if duplicate_knockout:
                raise DuplicateMatchError(f"Could not {action}: a knockout match with this label already exists") from e
            raise StoreError(f"Could not {action}: {e.orig}") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Store failure during %s: %s", action, e)
            raise StoreError(f"Could not {action}") from e

    def _query(self, action: str, fn):
        try:
            return fn()
        except SQLAlchemyError as e:
            logger.error("Store failure during %s: %s", action, e)
            raise StoreError(f"Could not {action}") from e


class TeamStore(_SessionStore):

    def list_teams(self) -> list[Team]:
        return self._query("list teams", lambda: self.session.query(Team).order_by(Team.id).all())

    def get_team(self, team_id: int) -> Team:
        team = self._query("load team", lambda: self.session.get(Team, team_id))
        if team is None:
            raise TeamNotFoundError(f"Team {team_id} not found")
        return team

    def create_team(self, name: str, short_name: str, logo_url: Optional[str] = None) -> Team:
        team = Team(name=name, short_name=short_name, logo_url=logo_url)
        self.session.add(team)
        self._commit("create team")
        logger.info("Created team %s (%s)", team.name, team.short_name)
        return team

    def delete_team(self, team_id: int) -> None:
        team = self.get_team(team_id)
        self.session.delete(team)
        self._commit("delete team")


class MatchStore(_SessionStore):
    """
    Match records for one tournament.

    Listeners registered with subscribe() are called after every committed
    change, which is how bracket progression learns that data moved.
    """

    def __init__(self, session: Session, tournament_id: Optional[str] = None):
        super().__init__(session)
        self.tournament_id = tournament_id or settings.TOURNAMENT_ID
        self._listeners: list[Callable[[], None]] = []

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def list_matches(self) -> list[Match]:
        return self._query(
            "list matches",
            lambda: (
                self.session.query(Match)
                .filter_by(tournament_id=self.tournament_id)
                .order_by(Match.id)
                .all()
            ),
        )

    def get_match(self, match_id: int) -> Match:
        match = self._query("load match", lambda: self.session.get(Match, match_id))
        if match is None or match.tournament_id != self.tournament_id:
            raise MatchNotFoundError(f"Match {match_id} not found")
        return match

    def _new_match(self, spec: MatchSpec) -> Match:
        return Match(
            tournament_id=self.tournament_id,
            team1_id=spec.team1_id,
            team2_id=spec.team2_id,
            team1_name=spec.team1_name,
            team2_name=spec.team2_name,
            match_type=spec.match_type,
            total_balls_per_team=spec.total_balls_per_team,
            date=spec.date,
            team1_score=Innings(),
            team2_score=Innings(),
            status=MatchStatus.UPCOMING,
            result="",
        )

    def create_match(
        self,
        team1_id: int,
        team2_id: int,
        team1_name: str,
        team2_name: str,
        match_type: str,
        total_balls_per_team: int,
        date: Optional[datetime] = None,
    ) -> Match:
        spec = MatchSpec(team1_id, team2_id, team1_name, team2_name, match_type, total_balls_per_team)
        if date is not None:
            spec.date = date
        return self.create_matches([spec])[0]

    def create_matches(self, specs: list[MatchSpec]) -> list[Match]:
        """Create several matches in one transaction - all of them or none"""
        matches = [self._new_match(spec) for spec in specs]
        self.session.add_all(matches)
        self._commit(f"create {len(matches)} match(es)", duplicate_knockout=True)
        for match in matches:
            logger.info("Created match #%s: %s vs %s (%s)", match.id, match.team1_name, match.team2_name, match.match_type)
        self._notify()
        return matches

    def replace_matches(self, specs: list[MatchSpec]) -> list[Match]:
        """
        Delete every match of the tournament and create the given ones in the
        same commit. Anything else staged on the session (the bracket config)
        goes in with it or not at all.
        """
        existing = self.list_matches()
        for match in existing:
            self.session.delete(match)
        matches = [self._new_match(spec) for spec in specs]
        self.session.add_all(matches)
        self._commit(f"replace {len(existing)} match(es) with {len(matches)}")
        logger.info("Replaced %s match(es) with %s new fixture(s)", len(existing), len(matches))
        self._notify()
        return matches

    def set_live(self, match_id: int, expected: MatchStatus, result: Optional[str] = None) -> Match:
        """
        Make one match live and complete every other live match, in one commit.

        Both writes are conditional UPDATEs, so the check that the target is
        still in the expected status and the completion of whatever is live
        happen inside the same transaction as the status change.
        """
        match = self.get_match(match_id)
        values = {"status": MatchStatus.LIVE}
        if result is not None:
            values["result"] = result

        try:
            completed = self.session.execute(
                update(Match)
                .where(
                    Match.tournament_id == self.tournament_id,
                    Match.status == MatchStatus.LIVE,
                    Match.id != match_id,
                )
                .values(status=MatchStatus.COMPLETED)
            ).rowcount
            changed = self.session.execute(
                update(Match)
                .where(Match.id == match_id, Match.status == expected)
                .values(**values)
            ).rowcount
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Store failure while starting match %s: %s", match_id, e)
            raise StoreError(f"Could not start match {match_id}") from e

        if changed != 1:
            self.session.rollback()
            raise InvalidTransitionError(
                f"Match #{match_id} is no longer {expected.value}; it was changed by another request"
            )

        self._commit(f"start match {match_id}")
        if completed:
            logger.info("Force-completed %s live match(es) before match #%s went live", completed, match_id)
        self._notify()
        return match

    def update_match_score(
        self,
        match_id: int,
        team1_score: Optional[Innings] = None,
        team2_score: Optional[Innings] = None,
        status: Optional[MatchStatus] = None,
        result: Optional[str] = None,
        events: Optional[list[ScoreEvent]] = None,
    ) -> Match:
        match = self.get_match(match_id)
        if team1_score is not None:
            match.team1_score = team1_score
        if team2_score is not None:
            match.team2_score = team2_score
        if status is not None:
            match.status = status
        if result is not None:
            match.result = result
        for event in events or []:
            match.events.append(event)
        self._commit(f"update match {match_id}")
        self._notify()
        return match

    def delete_match(self, match_id: int) -> None:
        """Operator-facing CRUD only; the engine never deletes matches"""
        match = self.get_match(match_id)
        self.session.delete(match)
        self._commit(f"delete match {match_id}")
        logger.info("Deleted match #%s", match_id)
        self._notify()

    def last_event(self, match_id: int, side: Side) -> Optional[ScoreEvent]:
        return self._query(
            "load score events",
            lambda: (
                self.session.query(ScoreEvent)
                .filter_by(match_id=match_id, side=side)
                .order_by(ScoreEvent.id.desc())
                .first()
            ),
        )

    def pop_event(self, match_id: int, side: Side) -> Optional[ScoreEvent]:
        """Remove and return the side's latest event (uncommitted until the next update)"""
        event = self.last_event(match_id, side)
        if event is not None:
            # delete-orphan cascade removes the row on flush
            event.match.events.remove(event)
        return event


class BracketConfigStore(_SessionStore):
    """The small key-value document holding the two group slot arrays"""

    def __init__(self, session: Session, tournament_id: Optional[str] = None):
        super().__init__(session)
        self.tournament_id = tournament_id or settings.TOURNAMENT_ID

    def get_bracket_config(self) -> BracketConfig:
        document = self._query("load bracket config", lambda: self.session.get(BracketDocument, self.tournament_id))
        if document is None:
            return BracketConfig()
        return document.to_config()

    def set_bracket_config(self, config: BracketConfig, commit: bool = True) -> BracketConfig:
        """With commit=False the change is only staged on the session for a later commit"""
        for group in (config.group_a, config.group_b):
            if len(group) != GROUP_SIZE:
                raise ValueError(f"Each group needs exactly {GROUP_SIZE} slots, got {len(group)}")

        document = self._query("load bracket config", lambda: self.session.get(BracketDocument, self.tournament_id))
        if document is None:
            document = BracketDocument(tournament_id=self.tournament_id)
            self.session.add(document)
        document.group_a = [team_id or None for team_id in config.group_a]
        document.group_b = [team_id or None for team_id in config.group_b]
        if commit:
            self._commit("save bracket config")
            logger.info("Saved bracket config: A=%s B=%s", document.group_a, document.group_b)
        return document.to_config()
