"""
Bracket configuration - which teams sit in which group slot
"""
from typing import Optional, List
from dataclasses import dataclass, field
from sqlalchemy import String, JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from cricket_cup.database import Base

GROUP_SIZE = 4


def _empty_group() -> list:
    return [None] * GROUP_SIZE


@dataclass
class BracketConfig:
    """
    Two ordered 4-slot groups. A slot is a team id or None when unfilled.
    """
    group_a: List[Optional[int]] = field(default_factory=_empty_group)
    group_b: List[Optional[int]] = field(default_factory=_empty_group)

    @staticmethod
    def _filled(group: List[Optional[int]]) -> list[int]:
        return [team_id for team_id in group if team_id]

    @property
    def group_a_teams(self) -> list[int]:
        return self._filled(self.group_a)

    @property
    def group_b_teams(self) -> list[int]:
        return self._filled(self.group_b)

    @property
    def all_teams(self) -> list[int]:
        return self.group_a_teams + self.group_b_teams

    @staticmethod
    def _group_complete(group: List[Optional[int]]) -> bool:
        filled = [team_id for team_id in group if team_id]
        return len(filled) == GROUP_SIZE and len(set(filled)) == GROUP_SIZE

    @property
    def is_complete(self) -> bool:
        """Both groups fully assigned with distinct teams"""
        return (
            self._group_complete(self.group_a)
            and self._group_complete(self.group_b)
            and not set(self.group_a) & set(self.group_b)
        )

    def to_dict(self) -> dict:
        return {"group_a": list(self.group_a), "group_b": list(self.group_b)}


class BracketDocument(Base):
    """Persisted bracket configuration, one row per tournament key"""
    __tablename__ = "bracket_configs"

    tournament_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    group_a: Mapped[list] = mapped_column(JSON, default=_empty_group)
    group_b: Mapped[list] = mapped_column(JSON, default=_empty_group)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_config(self) -> BracketConfig:
        return BracketConfig(group_a=list(self.group_a), group_b=list(self.group_b))

    def __repr__(self):
        return f"<BracketDocument '{self.tournament_id}'>"
