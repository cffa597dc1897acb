"""
Team API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from cricket_cup.engine.exceptions import TournamentError
from cricket_cup.services import Tournament
from cricket_cup.api.common import get_tournament, http_error
from cricket_cup.api.schemas import TeamCreate, TeamResponse

router = APIRouter(prefix="/teams", tags=["Teams"])


@router.get("", response_model=List[TeamResponse])
def list_teams(tournament: Tournament = Depends(get_tournament)):
    """List all teams"""
    try:
        return [TeamResponse.model_validate(t) for t in tournament.teams.list_teams()]
    except TournamentError as e:
        raise http_error(e)


@router.post("", response_model=TeamResponse, status_code=201)
def create_team(request: TeamCreate, tournament: Tournament = Depends(get_tournament)):
    """Register a team"""
    if not request.name.strip() or not request.short_name.strip():
        raise HTTPException(status_code=400, detail="Team name and short name are required")
    try:
        team = tournament.teams.create_team(request.name.strip(), request.short_name.strip(), request.logo_url)
    except TournamentError as e:
        raise http_error(e)
    return TeamResponse.model_validate(team)


@router.delete("/{team_id}")
def delete_team(team_id: int, tournament: Tournament = Depends(get_tournament)):
    """Delete a team; its matches keep the copied team names"""
    try:
        tournament.teams.delete_team(team_id)
    except TournamentError as e:
        raise http_error(e)
    return {"message": "Team deleted"}
