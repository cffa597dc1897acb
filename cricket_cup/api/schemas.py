"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from cricket_cup.models.match import GROUP_STAGE


# Enums
class MatchStatusEnum(str, Enum):
    UPCOMING = "upcoming"
    LIVE = "live"
    COMPLETED = "completed"


class SideEnum(str, Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"


# Team Schemas
class TeamBase(BaseModel):
    name: str
    short_name: str
    logo_url: Optional[str] = None


class TeamCreate(TeamBase):
    pass


class TeamResponse(TeamBase):
    id: int

    class Config:
        from_attributes = True


# Score Schemas
class InningsSchema(BaseModel):
    runs: int = 0
    wickets: int = 0
    balls: int = 0

    class Config:
        from_attributes = True


# Match Schemas
class MatchCreate(BaseModel):
    team1_id: int
    team2_id: int
    match_type: str = GROUP_STAGE
    total_balls_per_team: Optional[int] = None
    date: Optional[datetime] = None


class MatchResponse(BaseModel):
    id: int
    team1_id: int
    team2_id: int
    team1_name: str
    team2_name: str
    match_type: str
    total_balls_per_team: int
    team1_score: InningsSchema
    team2_score: InningsSchema
    status: MatchStatusEnum
    result: str
    date: datetime


class ScoreUpdateRequest(BaseModel):
    team1_score: Optional[InningsSchema] = None
    team2_score: Optional[InningsSchema] = None
    status: Optional[MatchStatusEnum] = None


class RunsRequest(BaseModel):
    side: SideEnum
    runs: int = 1  # negative for a correction


class CountRequest(BaseModel):
    side: SideEnum
    undo: bool = False


class UndoRequest(BaseModel):
    side: SideEnum


# Tournament Schemas
class BracketConfigSchema(BaseModel):
    group_a: list[Optional[int]] = Field(default_factory=lambda: [None] * 4)
    group_b: list[Optional[int]] = Field(default_factory=lambda: [None] * 4)


class StandingResponse(BaseModel):
    position: int
    team_id: int
    team_name: str
    team_short_name: str
    played: int
    wins: int
    draws: int
    losses: int
    points: int
    nrr: float


class GroupStandingsResponse(BaseModel):
    group_a: list[StandingResponse]
    group_b: list[StandingResponse]


class StartTournamentRequest(BaseModel):
    reset: bool = False
    total_balls_per_team: Optional[int] = None
    config: Optional[BracketConfigSchema] = None


class StartTournamentResponse(BaseModel):
    config: BracketConfigSchema
    matches: list[MatchResponse]


class AdvancementResponse(BaseModel):
    created: list[MatchResponse]
    semi_finals_created: bool
    final_created: bool
    integrity_issues: list[str]


class KnockoutSlotResponse(BaseModel):
    label: str
    match: Optional[MatchResponse] = None
    winner_id: Optional[int] = None
    winner_name: Optional[str] = None


class BracketResponse(BaseModel):
    semi_final_1: KnockoutSlotResponse
    semi_final_2: KnockoutSlotResponse
    final: KnockoutSlotResponse
    champion: Optional[str] = None
