"""
Tournament API endpoints - groups, standings, bracket progression
"""
from fastapi import APIRouter, Depends, HTTPException

from cricket_cup.engine.bracket import bracket_overview, KnockoutSlot
from cricket_cup.engine.exceptions import TournamentError
from cricket_cup.engine.fixtures import start_tournament
from cricket_cup.engine.standings import group_standings, Standing
from cricket_cup.models.bracket import BracketConfig
from cricket_cup.services import Tournament
from cricket_cup.api.common import get_tournament, http_error, match_response
from cricket_cup.api.schemas import (
    BracketConfigSchema, GroupStandingsResponse, StandingResponse,
    StartTournamentRequest, StartTournamentResponse, AdvancementResponse,
    KnockoutSlotResponse, BracketResponse,
)

router = APIRouter(prefix="/tournament", tags=["Tournament"])


def _standing_rows(standings: list[Standing]) -> list[StandingResponse]:
    return [
        StandingResponse(
            position=pos,
            team_id=s.team.id,
            team_name=s.team.name,
            team_short_name=s.team.short_name,
            played=s.played,
            wins=s.wins,
            draws=s.draws,
            losses=s.losses,
            points=s.points,
            nrr=round(s.net_run_rate, 3),
        )
        for pos, s in enumerate(standings, 1)
    ]


def _slot_response(slot: KnockoutSlot) -> KnockoutSlotResponse:
    return KnockoutSlotResponse(
        label=slot.label,
        match=match_response(slot.match) if slot.match else None,
        winner_id=slot.winner_id,
        winner_name=slot.winner_name,
    )


@router.get("/bracket-config", response_model=BracketConfigSchema)
def get_bracket_config(tournament: Tournament = Depends(get_tournament)):
    try:
        config = tournament.config.get_bracket_config()
    except TournamentError as e:
        raise http_error(e)
    return BracketConfigSchema(**config.to_dict())


@router.put("/bracket-config", response_model=BracketConfigSchema)
def set_bracket_config(request: BracketConfigSchema, tournament: Tournament = Depends(get_tournament)):
    """Save the group slots; empty slots are null"""
    config = BracketConfig(group_a=request.group_a, group_b=request.group_b)
    try:
        known = {team.id for team in tournament.teams.list_teams()}
    except TournamentError as e:
        raise http_error(e)
    unknown = [team_id for team_id in config.all_teams if team_id not in known]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown team(s): {unknown}")

    try:
        saved = tournament.config.set_bracket_config(config)
        # New groups can make the bracket eligible
        tournament.monitor.evaluate()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TournamentError as e:
        raise http_error(e)
    return BracketConfigSchema(**saved.to_dict())


@router.get("/standings", response_model=GroupStandingsResponse)
def get_standings(tournament: Tournament = Depends(get_tournament)):
    """Both group tables from completed group-stage matches"""
    try:
        group_a, group_b = group_standings(
            tournament.config.get_bracket_config(),
            tournament.matches.list_matches(),
            tournament.teams.list_teams(),
        )
    except TournamentError as e:
        raise http_error(e)
    return GroupStandingsResponse(group_a=_standing_rows(group_a), group_b=_standing_rows(group_b))


@router.post("/start", response_model=StartTournamentResponse)
def start(request: StartTournamentRequest, tournament: Tournament = Depends(get_tournament)):
    """Assign groups and schedule the 12 group matches"""
    config = None
    if request.config is not None:
        config = BracketConfig(group_a=request.config.group_a, group_b=request.config.group_b)
    try:
        saved, matches = start_tournament(
            tournament.matches,
            tournament.teams,
            tournament.config,
            config=config,
            reset=request.reset,
            total_balls_per_team=request.total_balls_per_team,
        )
    except TournamentError as e:
        raise http_error(e)
    return StartTournamentResponse(
        config=BracketConfigSchema(**saved.to_dict()),
        matches=[match_response(m) for m in matches],
    )


@router.post("/advance", response_model=AdvancementResponse)
def advance(tournament: Tournament = Depends(get_tournament)):
    """Run both progression checks now; safe to call any number of times"""
    try:
        report = tournament.monitor.evaluate()
    except TournamentError as e:
        raise http_error(e)
    return AdvancementResponse(
        created=[match_response(m) for m in report.created],
        semi_finals_created=report.flags.semi_finals_created,
        final_created=report.flags.final_created,
        integrity_issues=report.integrity_issues,
    )


@router.get("/bracket", response_model=BracketResponse)
def get_bracket(tournament: Tournament = Depends(get_tournament)):
    """Knockout stage view"""
    try:
        overview = bracket_overview(tournament.matches.list_matches())
    except TournamentError as e:
        raise http_error(e)
    final = overview["final"]
    return BracketResponse(
        semi_final_1=_slot_response(overview["semi_final_1"]),
        semi_final_2=_slot_response(overview["semi_final_2"]),
        final=_slot_response(final),
        champion=final.winner_name,
    )
