"""
Shared API helpers - dependencies, error mapping and response builders
"""
from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from cricket_cup.database import get_db
from cricket_cup.engine.exceptions import (
    TournamentError, StoreError, MatchNotFoundError, TeamNotFoundError, DuplicateMatchError
)
from cricket_cup.models.match import Match
from cricket_cup.services import Tournament, build_tournament
from cricket_cup.api.schemas import MatchResponse, InningsSchema


def get_tournament(db: Session = Depends(get_db)) -> Tournament:
    """FastAPI dependency - stores and engine bound to the request's session"""
    return build_tournament(db)


def http_error(error: TournamentError) -> HTTPException:
    if isinstance(error, (MatchNotFoundError, TeamNotFoundError)):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, DuplicateMatchError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, StoreError):
        return HTTPException(status_code=503, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


def match_response(match: Match) -> MatchResponse:
    return MatchResponse(
        id=match.id,
        team1_id=match.team1_id,
        team2_id=match.team2_id,
        team1_name=match.team1_name,
        team2_name=match.team2_name,
        match_type=match.match_type,
        total_balls_per_team=match.total_balls_per_team,
        team1_score=InningsSchema.model_validate(match.team1_score),
        team2_score=InningsSchema.model_validate(match.team2_score),
        status=match.status.value,
        result=match.result or "",
        date=match.date,
    )
