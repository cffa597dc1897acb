"""
CLI tests through click's CliRunner against the in-memory database.
"""
import pytest
from click.testing import CliRunner

import cli as cli_module
from cricket_cup.engine.score import Innings
from cricket_cup.models.match import MatchStatus
from cricket_cup.stores import MatchStore


@pytest.fixture
def runner(test_db, monkeypatch):
    monkeypatch.setattr(cli_module, "get_session", lambda: test_db)
    return CliRunner()


@pytest.fixture
def chase(tournament):
    """Rangers need two to win off their remaining balls."""
    match = tournament.lifecycle.start_match(tournament.lifecycle.create_match(1, 2).id)
    tournament.lifecycle.update_score(
        match.id,
        team1_score=Innings(runs=100, balls=30),
        team2_score=Innings(runs=99, balls=10),
    )
    return match.id


class TestScoreCommand:

    def test_actions_after_the_winning_run_are_not_applied(self, runner, test_db, chase):
        result = runner.invoke(cli_module.cli, ["score", str(chase), "team2", "--runs", "2", "--wicket"])

        assert result.exit_code == 0, result.output
        assert "not applied: wicket" in result.output
        match = MatchStore(test_db).get_match(chase)
        assert match.status == MatchStatus.COMPLETED
        assert match.team2_score.wickets == 0
        assert match.team2_score.runs == 101

    def test_combined_actions_on_a_live_match(self, runner, test_db, chase):
        result = runner.invoke(cli_module.cli, ["score", str(chase), "team2", "--wicket", "--ball"])

        assert result.exit_code == 0, result.output
        match = MatchStore(test_db).get_match(chase)
        assert match.status == MatchStatus.LIVE
        assert (match.team2_score.wickets, match.team2_score.balls) == (1, 11)

    def test_scoring_a_finished_match_fails(self, runner, tournament, chase):
        tournament.lifecycle.complete_match(chase)
        result = runner.invoke(cli_module.cli, ["score", str(chase), "team2", "--runs", "1"])
        assert result.exit_code == 1
