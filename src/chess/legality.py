"""
Check detection and the legality filter.

A candidate move is legal when, after playing it on a throwaway copy of the position, the mover's own king is not attacked.
"""

from src.chess.moves import Move, candidate_moves, candidate_moves_for_color
from src.chess.pieces import Color, opposite
from src.chess.position import Position, simulate_move
from src.chess.square import Square


def is_check(position: Position, color: Color) -> bool:
    """
    Is the king of the given color attacked?
    ---

    Re-uses the opponent's candidate moves: if any of them lands on the king's square, the king is in check.
    NOTE: The opponent's moves are pseudo-legal (pinned pieces still give check). Only the threat of capture matters.
    NOTE: No king on the board means no check.
    """
    king_square = position.board.locate_king(color)
    if king_square is None:
        return False

    opponent_moves = candidate_moves_for_color(position, opposite(color))
    return any(move.to_square == king_square for move in opponent_moves)


def is_putting_yourself_in_check(position: Position, move: Move) -> bool:
    """Return True if the move leaves the mover's own king in check

    plan:
    1. Copy the position
    2. make the candidate move
    3. determine if king is in check on the new board
    """
    player_color = position.piece(move.from_square).color
    return is_check(simulate_move(position, move), player_color)


def legal_moves(position: Position, square: Square) -> list[Move]:
    """Candidate moves of the piece on the square, minus those that leave its own king in check."""
    return [
        move
        for move in candidate_moves(position, square)
        if not is_putting_yourself_in_check(position, move)
    ]


def legal_moves_for_color(position: Position, color: Color) -> list[Move]:
    """
    List of legal moves for the player with the 'color' pieces
    ----

    Union over every square that player occupies, in board order (8th rank first, a-file first).
    """
    moves: list[Move] = []
    for square in position.locate_color(color):
        moves.extend(legal_moves(position, square))
    return moves


def has_legal_move(position: Position, color: Color) -> bool:
    """Stops at the first legal move found."""
    return any(
        legal_moves(position, square) for square in position.locate_color(color)
    )
