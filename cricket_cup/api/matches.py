"""
Match API endpoints - CRUD, status transitions and live scoring
"""
from fastapi import APIRouter, Depends
from typing import List, Optional

from cricket_cup.engine.exceptions import TournamentError
from cricket_cup.engine.score import Innings, Side
from cricket_cup.models.match import MatchStatus
from cricket_cup.services import Tournament
from cricket_cup.api.common import get_tournament, http_error, match_response
from cricket_cup.api.schemas import (
    MatchCreate, MatchResponse, ScoreUpdateRequest, RunsRequest, CountRequest,
    UndoRequest, MatchStatusEnum, InningsSchema,
)

router = APIRouter(prefix="/matches", tags=["Matches"])


def _innings(schema: Optional[InningsSchema]) -> Optional[Innings]:
    if schema is None:
        return None
    return Innings(runs=schema.runs, wickets=schema.wickets, balls=schema.balls)


@router.get("", response_model=List[MatchResponse])
def list_matches(status: Optional[MatchStatusEnum] = None, tournament: Tournament = Depends(get_tournament)):
    """List matches, optionally filtered by status"""
    try:
        matches = tournament.matches.list_matches()
    except TournamentError as e:
        raise http_error(e)
    if status:
        matches = [m for m in matches if m.status.value == status.value]
    return [match_response(m) for m in matches]


@router.get("/{match_id}", response_model=MatchResponse)
def get_match(match_id: int, tournament: Tournament = Depends(get_tournament)):
    try:
        return match_response(tournament.matches.get_match(match_id))
    except TournamentError as e:
        raise http_error(e)


@router.post("", response_model=MatchResponse, status_code=201)
def create_match(request: MatchCreate, tournament: Tournament = Depends(get_tournament)):
    """Schedule a match manually (always starts as upcoming)"""
    try:
        match = tournament.lifecycle.create_match(
            request.team1_id,
            request.team2_id,
            match_type=request.match_type,
            total_balls_per_team=request.total_balls_per_team,
            date=request.date,
        )
    except TournamentError as e:
        raise http_error(e)
    return match_response(match)


@router.delete("/{match_id}")
def delete_match(match_id: int, tournament: Tournament = Depends(get_tournament)):
    try:
        tournament.matches.delete_match(match_id)
    except TournamentError as e:
        raise http_error(e)
    return {"message": "Match deleted"}


@router.patch("/{match_id}/score", response_model=MatchResponse)
def update_score(match_id: int, request: ScoreUpdateRequest, tournament: Tournament = Depends(get_tournament)):
    """
    Set scores and/or status in one call. Going live happens before the
    scores are applied, completing happens after.
    """
    lifecycle = tournament.lifecycle
    try:
        match = tournament.matches.get_match(match_id)
        if request.status == MatchStatusEnum.LIVE:
            match = lifecycle.set_status(match_id, MatchStatus.LIVE)

        if request.team1_score is not None or request.team2_score is not None:
            match = lifecycle.update_score(match_id, _innings(request.team1_score), _innings(request.team2_score))

        if request.status in (MatchStatusEnum.COMPLETED, MatchStatusEnum.UPCOMING):
            match = lifecycle.set_status(match_id, MatchStatus(request.status.value))
    except TournamentError as e:
        raise http_error(e)
    return match_response(match)


@router.post("/{match_id}/start", response_model=MatchResponse)
def start_match(match_id: int, tournament: Tournament = Depends(get_tournament)):
    """Make an upcoming match live; any other live match is completed first"""
    try:
        return match_response(tournament.lifecycle.start_match(match_id))
    except TournamentError as e:
        raise http_error(e)


@router.post("/{match_id}/complete", response_model=MatchResponse)
def complete_match(match_id: int, tournament: Tournament = Depends(get_tournament)):
    try:
        return match_response(tournament.lifecycle.complete_match(match_id))
    except TournamentError as e:
        raise http_error(e)


@router.post("/{match_id}/reopen", response_model=MatchResponse)
def reopen_match(match_id: int, tournament: Tournament = Depends(get_tournament)):
    """Operator override: completed back to live"""
    try:
        return match_response(tournament.lifecycle.reopen_match(match_id))
    except TournamentError as e:
        raise http_error(e)


@router.post("/{match_id}/runs", response_model=MatchResponse)
def add_runs(match_id: int, request: RunsRequest, tournament: Tournament = Depends(get_tournament)):
    try:
        match = tournament.lifecycle.add_runs(match_id, Side(request.side.value), request.runs)
    except TournamentError as e:
        raise http_error(e)
    return match_response(match)


@router.post("/{match_id}/wickets", response_model=MatchResponse)
def wicket(match_id: int, request: CountRequest, tournament: Tournament = Depends(get_tournament)):
    lifecycle = tournament.lifecycle
    side = Side(request.side.value)
    try:
        match = lifecycle.undo_wicket(match_id, side) if request.undo else lifecycle.add_wicket(match_id, side)
    except TournamentError as e:
        raise http_error(e)
    return match_response(match)


@router.post("/{match_id}/balls", response_model=MatchResponse)
def ball(match_id: int, request: CountRequest, tournament: Tournament = Depends(get_tournament)):
    lifecycle = tournament.lifecycle
    side = Side(request.side.value)
    try:
        match = lifecycle.undo_ball(match_id, side) if request.undo else lifecycle.add_ball(match_id, side)
    except TournamentError as e:
        raise http_error(e)
    return match_response(match)


@router.post("/{match_id}/undo", response_model=MatchResponse)
def undo_last(match_id: int, request: UndoRequest, tournament: Tournament = Depends(get_tournament)):
    """Undo the side's latest score action"""
    try:
        match = tournament.lifecycle.undo_last(match_id, Side(request.side.value))
    except TournamentError as e:
        raise http_error(e)
    return match_response(match)
