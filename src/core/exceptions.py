"""
Custom exceptions.

Every error the engine raises is local and recoverable: the worst outcome for the caller is "the operation had no effect".
NOTE: GameError deliberately does not derive from ValueError, so that pydantic validators let it propagate unchanged.
"""


class GameError(Exception):
    """Top-level exception for anything going wrong while handling a game."""


class InvalidSquareError(GameError):
    """Square name cannot be interpreted, e.g. 'z9' or 'e'."""


class InvalidFENError(GameError):
    """Exchange (FEN) string is malformed."""


class IllegalMoveError(GameError):
    """Requested move is not among the legal moves of the side to move."""


class GameStateError(GameError):
    """Operation is not allowed in the current state of the game."""


class RepositoryError(GameError):
    """Persistence layer could not find / store the requested game."""


class InvalidRequestError(GameError):
    """Request payload cannot be interpreted."""
