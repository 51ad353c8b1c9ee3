"""
Custom exceptions.

Everything derives from GameError, so the service (and whatever sits on top of it) can catch the whole family at once.
"""

from src.core.shared_types import FenceRejection


class GameError(Exception):
    """Root of all domain errors"""


class GameStateError(GameError):
    """Command does not fit the state the game is in (ex. the game is already over)"""


class NotYourTurnError(GameError):
    pass


class IllegalMoveError(GameError):
    """Pawn destination is not in the set of legal moves"""


class IllegalFenceError(GameError):
    """Fence placement failed one of the legality checks. The reason tells which one."""

    def __init__(self, message: str, reason: FenceRejection) -> None:
        super().__init__(message)
        self.reason = reason


class NoLegalMovesError(GameError):
    """The side to move cannot move its pawn at all. Legal play practically never gets there."""


class InvalidRequestError(GameError):
    pass


class RepositoryError(GameError):
    pass
