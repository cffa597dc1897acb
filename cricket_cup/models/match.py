from typing import Optional, List
from sqlalchemy import String, Integer, ForeignKey, Enum, DateTime, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship, composite
from datetime import datetime
import enum
from cricket_cup.config import settings
from cricket_cup.database import Base
from cricket_cup.engine.score import Innings, Side


GROUP_STAGE = settings.GROUP_STAGE_MATCH_TYPE
SEMI_FINAL_1 = "Semi-Final 1"
SEMI_FINAL_2 = "Semi-Final 2"
FINAL = "Final"
KNOCKOUT_MATCH_TYPES = (SEMI_FINAL_1, SEMI_FINAL_2, FINAL)


def is_knockout_type(match_type: Optional[str]) -> bool:
    """Any semi-final or final label, however it is spelled"""
    label = (match_type or "").lower()
    return "semi" in label or "final" in label


def is_final_type(match_type: Optional[str]) -> bool:
    label = (match_type or "").lower()
    return "final" in label and "semi" not in label


class MatchStatus(enum.Enum):
    UPCOMING = "upcoming"
    LIVE = "live"
    COMPLETED = "completed"


class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        # At most one of each knockout fixture per tournament
        Index(
            "uq_knockout_match_type",
            "tournament_id",
            "match_type",
            unique=True,
            sqlite_where=text("match_type IN ('Semi-Final 1', 'Semi-Final 2', 'Final')"),
            postgresql_where=text("match_type IN ('Semi-Final 1', 'Semi-Final 2', 'Final')"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    tournament_id: Mapped[str] = mapped_column(String(50), default="default")

    # Teams - names are copied so a match still reads after a team is deleted
    team1_id: Mapped[int] = mapped_column(Integer)
    team2_id: Mapped[int] = mapped_column(Integer)
    team1_name: Mapped[str] = mapped_column(String(100))
    team2_name: Mapped[str] = mapped_column(String(100))

    # Match info
    match_type: Mapped[str] = mapped_column(String(50), default=GROUP_STAGE)
    total_balls_per_team: Mapped[int] = mapped_column(Integer, default=30)
    date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Score
    team1_score: Mapped[Innings] = composite(
        mapped_column("team1_runs", Integer, default=0),
        mapped_column("team1_wickets", Integer, default=0),
        mapped_column("team1_balls", Integer, default=0),
    )
    team2_score: Mapped[Innings] = composite(
        mapped_column("team2_runs", Integer, default=0),
        mapped_column("team2_wickets", Integer, default=0),
        mapped_column("team2_balls", Integer, default=0),
    )

    # Status
    status: Mapped[MatchStatus] = mapped_column(Enum(MatchStatus), default=MatchStatus.UPCOMING)
    result: Mapped[str] = mapped_column(String(200), default="")

    # Score actions, newest last
    events: Mapped[List["ScoreEvent"]] = relationship(
        "ScoreEvent", back_populates="match", order_by="ScoreEvent.id", cascade="all, delete-orphan"
    )

    def score_for(self, side: Side) -> Innings:
        return self.team1_score if side == Side.TEAM1 else self.team2_score

    def has_team(self, team_id: int) -> bool:
        return team_id in (self.team1_id, self.team2_id)

    def __repr__(self):
        return f"<Match {self.team1_name} vs {self.team2_name} ({self.match_type}, {self.status.value})>"


class ScoreEvent(Base):
    """
    One accepted score action with the innings as it was before it.
    Undo restores the snapshot of the side's latest event.
    """
    __tablename__ = "score_events"

    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id", ondelete="CASCADE"))
    match: Mapped["Match"] = relationship("Match", back_populates="events")

    side: Mapped[Side] = mapped_column(Enum(Side))
    action: Mapped[str] = mapped_column(String(20))  # "runs", "wicket", "ball", "score"
    delta: Mapped[int] = mapped_column(Integer, default=0)

    previous: Mapped[Innings] = composite(
        mapped_column("previous_runs", Integer, default=0),
        mapped_column("previous_wickets", Integer, default=0),
        mapped_column("previous_balls", Integer, default=0),
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<ScoreEvent {self.side.value} {self.action} {self.delta:+d}>"
