"""Exceptions raised by the tournament engine and its stores"""


class TournamentError(Exception):
    """Base exception for all tournament errors.

    Pure computations (results, standings) never raise; only operations
    that change stored state do.
    """

    pass


# ========== Lifecycle Exceptions ==========


class InvalidTransitionError(TournamentError):
    """Raised when a status change or score mutation is not allowed in the match's current state."""

    pass


class InvalidMatchError(TournamentError):
    """Raised when a manually created match has unknown or identical teams, or no balls to play."""

    pass


# ========== Store Exceptions ==========


class StoreError(TournamentError):
    """Raised when a read or write against a store fails. Recoverable; never retried by the engine."""

    pass


class MatchNotFoundError(StoreError):
    """Raised when a match is missing, e.g. deleted between two reads."""

    pass


class TeamNotFoundError(StoreError):
    """Raised when a team id does not exist in the team store."""

    pass


class DuplicateMatchError(StoreError):
    """Raised when the store rejects a second knockout match with the same label."""

    pass


# ========== Tournament Setup Exceptions ==========


class TournamentSetupError(TournamentError):
    """Raised when the group stage cannot be scheduled, e.g. fewer than 8 teams."""

    pass
