"""
Tests for group assignment and the round-robin schedule.
"""
import itertools

import pytest
from sqlalchemy.exc import OperationalError

from cricket_cup.engine.exceptions import StoreError, TournamentSetupError
from cricket_cup.engine.fixtures import round_robin_pairs, assign_groups, start_tournament
from cricket_cup.models.bracket import BracketConfig
from cricket_cup.models.match import MatchStatus, GROUP_STAGE


def start(tournament, **kwargs):
    return start_tournament(tournament.matches, tournament.teams, tournament.config, **kwargs)


class TestRoundRobin:

    def test_every_pair_plays_once(self):
        pairs = round_robin_pairs([10, 20, 30, 40])
        assert len(pairs) == 6
        assert {frozenset(p) for p in pairs} == {frozenset(p) for p in itertools.combinations([10, 20, 30, 40], 2)}

    def test_group_must_be_full(self):
        with pytest.raises(TournamentSetupError):
            round_robin_pairs([1, 2, 3])


class TestAssignGroups:

    def test_first_eight_teams_split_in_order(self, teams):
        config = assign_groups(teams)
        assert config.group_a == [1, 2, 3, 4]
        assert config.group_b == [5, 6, 7, 8]

    def test_needs_eight_teams(self, teams):
        with pytest.raises(TournamentSetupError):
            assign_groups(teams[:7])


class TestStartTournament:

    def test_schedules_twelve_upcoming_group_matches(self, unwatched):
        config, matches = start(unwatched)

        assert config.is_complete
        assert len(matches) == 12
        assert all(m.status == MatchStatus.UPCOMING for m in matches)
        assert all(m.match_type == GROUP_STAGE for m in matches)
        assert unwatched.config.get_bracket_config() == config

    def test_each_group_plays_only_itself(self, unwatched):
        config, matches = start(unwatched)
        for m in matches:
            same_a = m.team1_id in config.group_a and m.team2_id in config.group_a
            same_b = m.team1_id in config.group_b and m.team2_id in config.group_b
            assert same_a or same_b

    def test_explicit_config(self, unwatched):
        config = BracketConfig(group_a=[8, 7, 6, 5], group_b=[4, 3, 2, 1])
        saved, matches = start(unwatched, config=config, total_balls_per_team=24)
        assert saved.group_a == [8, 7, 6, 5]
        assert matches[0].team1_id == 8
        assert all(m.total_balls_per_team == 24 for m in matches)

    def test_refuses_to_overwrite_without_reset(self, unwatched):
        start(unwatched)
        with pytest.raises(TournamentSetupError):
            start(unwatched)
        assert len(unwatched.matches.list_matches()) == 12

    def test_reset_replaces_existing_matches(self, unwatched):
        _, first = start(unwatched)
        unwatched.lifecycle.start_match(first[0].id)

        _, second = start(unwatched, reset=True)
        remaining = unwatched.matches.list_matches()
        assert len(remaining) == 12
        assert {m.id for m in remaining} == {m.id for m in second}
        assert all(m.status == MatchStatus.UPCOMING for m in remaining)

    def test_failed_reset_keeps_previous_tournament(self, unwatched, monkeypatch):
        _, first = start(unwatched)

        def failing_commit():
            raise OperationalError("DELETE FROM matches", {}, Exception("disk I/O error"))

        monkeypatch.setattr(unwatched.matches.session, "commit", failing_commit)
        with pytest.raises(StoreError):
            start(unwatched, reset=True, config=BracketConfig(group_a=[8, 7, 6, 5], group_b=[4, 3, 2, 1]))
        monkeypatch.undo()

        assert {m.id for m in unwatched.matches.list_matches()} == {m.id for m in first}
        assert unwatched.config.get_bracket_config().group_a == [1, 2, 3, 4]

    def test_unknown_team_in_config(self, unwatched):
        config = BracketConfig(group_a=[1, 2, 3, 4], group_b=[5, 6, 7, 99])
        with pytest.raises(TournamentSetupError):
            start(unwatched, config=config)
