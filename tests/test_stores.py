"""
Tests for the stores: bracket config document, change notification and
error wrapping.
"""
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from cricket_cup.engine.exceptions import (
    StoreError, DuplicateMatchError, MatchNotFoundError, TeamNotFoundError
)
from cricket_cup.models.bracket import BracketConfig
from cricket_cup.stores import BracketConfigStore, MatchStore, MatchSpec, TeamStore


class TestBracketConfigStore:

    def test_default_is_empty(self, test_db):
        config = BracketConfigStore(test_db).get_bracket_config()
        assert config.group_a == [None, None, None, None]
        assert config.group_b == [None, None, None, None]
        assert not config.is_complete

    def test_round_trip_normalises_empty_slots(self, test_db, teams):
        store = BracketConfigStore(test_db)
        store.set_bracket_config(BracketConfig(group_a=[1, 0, 3, None], group_b=[5, 6, 7, 8]))

        config = store.get_bracket_config()
        assert config.group_a == [1, None, 3, None]
        assert config.group_b == [5, 6, 7, 8]

    def test_overwrites_existing_document(self, test_db, teams):
        store = BracketConfigStore(test_db)
        store.set_bracket_config(BracketConfig(group_a=[1, 2, 3, 4], group_b=[5, 6, 7, 8]))
        store.set_bracket_config(BracketConfig(group_a=[4, 3, 2, 1], group_b=[8, 7, 6, 5]))
        assert store.get_bracket_config().group_a == [4, 3, 2, 1]

    def test_group_must_have_four_slots(self, test_db):
        with pytest.raises(ValueError):
            BracketConfigStore(test_db).set_bracket_config(BracketConfig(group_a=[1, 2, 3]))

    def test_overlapping_groups_are_not_complete(self):
        config = BracketConfig(group_a=[1, 2, 3, 4], group_b=[4, 5, 6, 7])
        assert not config.is_complete


class TestMatchStore:

    def test_listeners_called_after_changes(self, test_db, teams):
        store = MatchStore(test_db)
        listener = MagicMock()
        store.subscribe(listener)

        match = store.create_match(1, 2, "Harbour Hawks", "Riverside Rangers", "Tournament", 30)
        store.update_match_score(match.id, result="Harbour Hawks batting...")
        store.delete_match(match.id)

        assert listener.call_count == 3

    def test_batch_is_all_or_nothing(self, test_db, teams):
        store = MatchStore(test_db)
        store.create_match(1, 6, "Harbour Hawks", "Lakeview Lions", "Semi-Final 1", 30)

        specs = [
            MatchSpec(5, 2, "Hillside Hurricanes", "Riverside Rangers", "Semi-Final 2", 30),
            MatchSpec(1, 6, "Harbour Hawks", "Lakeview Lions", "Semi-Final 1", 30),
        ]
        with pytest.raises(DuplicateMatchError):
            store.create_matches(specs)
        assert [m.match_type for m in store.list_matches()] == ["Semi-Final 1"]

    def test_tournaments_are_isolated(self, test_db, teams):
        MatchStore(test_db, "other").create_match(1, 2, "Harbour Hawks", "Riverside Rangers", "Tournament", 30)
        assert MatchStore(test_db).list_matches() == []

    def test_missing_match(self, test_db):
        with pytest.raises(MatchNotFoundError):
            MatchStore(test_db).get_match(1)

    def test_missing_team(self, test_db):
        with pytest.raises(TeamNotFoundError):
            TeamStore(test_db).get_team(1)


class TestStoreErrors:

    def test_failed_commit_rolls_back(self):
        session = MagicMock()
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))

        with pytest.raises(StoreError):
            TeamStore(session).create_team("Harbour Hawks", "HH")
        session.rollback.assert_called_once()

    def test_integrity_error_is_a_duplicate(self):
        session = MagicMock()
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        store = MatchStore(session)
        listener = MagicMock()
        store.subscribe(listener)

        with pytest.raises(DuplicateMatchError):
            store.create_match(1, 6, "Harbour Hawks", "Lakeview Lions", "Semi-Final 1", 30)
        listener.assert_not_called()

    def test_integrity_error_outside_match_creation_is_a_store_error(self):
        session = MagicMock()
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: teams.name"))

        with pytest.raises(StoreError) as raised:
            TeamStore(session).create_team("Harbour Hawks", "HH")
        assert not isinstance(raised.value, DuplicateMatchError)
        session.rollback.assert_called_once()

    def test_bracket_config_integrity_error_is_a_store_error(self):
        session = MagicMock()
        session.get.return_value = None
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: bracket_configs.tournament_id"))

        with pytest.raises(StoreError) as raised:
            BracketConfigStore(session).set_bracket_config(BracketConfig(group_a=[1, 2, 3, 4], group_b=[5, 6, 7, 8]))
        assert not isinstance(raised.value, DuplicateMatchError)

    def test_failed_read(self):
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))

        with pytest.raises(StoreError):
            MatchStore(session).list_matches()


class TestReplaceMatches:

    def test_staged_config_and_new_matches_commit_together(self, test_db, teams):
        matches = MatchStore(test_db)
        config_store = BracketConfigStore(test_db)
        matches.create_match(1, 2, "Harbour Hawks", "Riverside Rangers", "Tournament", 30)

        config_store.set_bracket_config(BracketConfig(group_a=[1, 2, 3, 4], group_b=[5, 6, 7, 8]), commit=False)
        created = matches.replace_matches([
            MatchSpec(3, 4, "Northgate Nomads", "Old Town Owls", "Tournament", 30),
            MatchSpec(5, 6, "Hillside Hurricanes", "Lakeview Lions", "Tournament", 30),
        ])

        assert [m.id for m in matches.list_matches()] == [m.id for m in created]
        assert config_store.get_bracket_config().group_a == [1, 2, 3, 4]
