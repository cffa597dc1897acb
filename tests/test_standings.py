"""
Tests for group standings: points, net run rate and ordering.
"""
import pytest

from cricket_cup.engine.score import Innings
from cricket_cup.engine.standings import compute_standings, group_standings
from cricket_cup.models.bracket import BracketConfig
from cricket_cup.models.match import Match, MatchStatus, GROUP_STAGE, SEMI_FINAL_1
from cricket_cup.models.team import Team


def make_match(team1_id, team2_id, team1_runs, team2_runs, balls=30,
               status=MatchStatus.COMPLETED, match_type=GROUP_STAGE):
    return Match(
        team1_id=team1_id,
        team2_id=team2_id,
        team1_name=f"Team {team1_id}",
        team2_name=f"Team {team2_id}",
        match_type=match_type,
        total_balls_per_team=30,
        team1_score=Innings(runs=team1_runs, wickets=2, balls=balls),
        team2_score=Innings(runs=team2_runs, wickets=2, balls=balls),
        status=status,
        result="",
    )


@pytest.fixture
def roster():
    return {i: Team(id=i, name=f"Team {i}", short_name=f"T{i}") for i in range(1, 9)}


class TestComputeStandings:

    def test_points_for_win_draw_loss(self, roster):
        matches = [
            make_match(1, 2, 50, 40),
            make_match(1, 3, 45, 45),
            make_match(4, 1, 60, 30),
        ]
        table = {s.team.id: s for s in compute_standings([1, 2, 3, 4], matches, roster)}

        assert (table[1].played, table[1].wins, table[1].draws, table[1].losses) == (3, 1, 1, 1)
        assert table[1].points == 3
        assert table[3].points == 1
        assert table[4].points == 2
        assert table[2].points == 0

    def test_net_run_rate(self, roster):
        table = compute_standings([1], [make_match(1, 2, 60, 30, balls=30)], roster)
        assert table[0].net_run_rate == pytest.approx(1.0)

    def test_no_balls_faced_means_zero_nrr(self, roster):
        table = compute_standings([1, 2], [make_match(1, 2, 0, 0, balls=0)], roster)
        assert all(s.net_run_rate == 0.0 for s in table)
        assert all(s.points == 1 for s in table)

    def test_only_completed_matches_count(self, roster):
        matches = [make_match(1, 2, 50, 40, status=MatchStatus.LIVE)]
        table = compute_standings([1, 2], matches, roster)
        assert all(s.played == 0 for s in table)

    def test_sorted_by_points_then_nrr(self, roster):
        matches = [
            make_match(1, 3, 50, 49),   # team 1 wins narrowly
            make_match(2, 4, 90, 30),   # team 2 wins big
            make_match(4, 3, 40, 20),
        ]
        order = [s.team.id for s in compute_standings([1, 2, 3, 4], matches, roster)]
        # 1, 2 and 4 all have two points; net run rate separates them
        assert order == [2, 1, 4, 3]

    def test_exact_ties_keep_group_order(self, roster):
        order = [s.team.id for s in compute_standings([3, 1, 4, 2], [], roster)]
        assert order == [3, 1, 4, 2]

    def test_deleted_team_left_out(self, roster):
        del roster[2]
        table = compute_standings([1, 2, 3, 4], [make_match(1, 2, 50, 40)], roster)
        assert [s.team.id for s in table] == [1, 3, 4]


class TestGroupStandings:

    def test_knockout_matches_do_not_count(self, roster):
        config = BracketConfig(group_a=[1, 2, 3, 4], group_b=[5, 6, 7, 8])
        matches = [
            make_match(1, 2, 50, 40),
            make_match(1, 6, 80, 10, match_type=SEMI_FINAL_1),
        ]
        group_a, group_b = group_standings(config, matches, roster.values())

        assert group_a[0].team.id == 1
        assert group_a[0].played == 1
        assert all(s.played == 0 for s in group_b)

    def test_unfilled_slots_are_skipped(self, roster):
        config = BracketConfig(group_a=[1, None, 3, None])
        group_a, group_b = group_standings(config, [], roster.values())
        assert [s.team.id for s in group_a] == [1, 3]
        assert group_b == []

    def test_only_group_stage_matches_between_group_teams_count(self, roster):
        config = BracketConfig(group_a=[1, 2, 3, 4], group_b=[5, 6, 7, None])
        matches = [
            make_match(1, 2, 50, 40),
            make_match(2, 1, 90, 10, match_type="Friendly"),
            make_match(1, 8, 10, 90),
        ]
        group_a, _ = group_standings(config, matches, roster.values())
        table = {s.team.id: s for s in group_a}

        assert (table[1].played, table[1].points) == (1, 2)
        assert (table[2].played, table[2].points) == (1, 0)
