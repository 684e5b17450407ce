"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define candidate (pseudo-legal) move sets for each piece type.


Legality (not leaving your own king in check) is checked later, see legality.py
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    castling_directions,
    castling_path,
)
from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Color, Piece, PieceType, opposite
from src.chess.square import BOARD_DIMENSIONS, Square


class Position(Protocol):
    """Just the parts the movement strategies need"""

    en_passant_square: Optional[Square]
    castling_rights: dict[CastlingDirection, bool]

    def piece(self, square: Square) -> Piece: ...
    def is_empty(self, square: Square) -> bool: ...
    def locate_color(self, color: Color) -> list[Square]: ...


Vector = tuple[int, int]


@dataclass
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None
    castling_direction: Optional[CastlingDirection] = None
    is_en_passant: bool = False
    is_capture: bool = False
    is_double_push: bool = False

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        ---
        One of the standard chess notations for moves

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        * "e1g1": the king castles king side

        NOTE: Captures / Castling / En Passant flags are not part of UCI. They get filled in by matching against generated moves.
        """
        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:4])
        move = cls(from_sq, to_sq)
        if len(uci) == 5:
            move.promote_to = FEN_TO_PIECE[uci[4]]
        return move

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, position: Position, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.

    ---
    Algorithm is supposed to be O(N) and the main method chess engines use.
    """

    player_color = position.piece(square).color
    opponent_color = opposite(player_color)

    moves: list[Move] = []
    for df, dr in directions:
        target_square = square.offset(df, dr)
        while target_square.is_within_bounds():
            if not position.is_empty(target_square):
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if position.piece(target_square).color == opponent_color:
                    moves.append(Move(square, target_square, is_capture=True))
                break

            moves.append(Move(square, target_square))
            target_square = target_square.offset(df, dr)
    return moves


def single_step_move(
    square: Square, position: Position, deltas: list[Vector]
) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    player_color = position.piece(square).color
    moves: list[Move] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        target_piece = position.piece(target_square)
        if target_piece.color != player_color:
            moves.append(
                Move(square, target_square, is_capture=not target_piece.is_empty)
            )

    return moves


# White moves UP the board, black moves DOWN
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: -1}
PAWN_HOME_RANK: dict[Color, int] = {Color.WHITE: 2, Color.BLACK: BOARD_DIMENSIONS[1] - 1}
PROMOTION_RANK: dict[Color, int] = {Color.WHITE: BOARD_DIMENSIONS[1], Color.BLACK: 1}
DEFAULT_PROMOTION = PieceType.QUEEN


def _promotion_for(square: Square, color: Color) -> Optional[PieceType]:
    """Underpromotion is never generated: reaching the farthest rank means a queen (the caller can still pick otherwise)."""
    return DEFAULT_PROMOTION if square.rank == PROMOTION_RANK[color] else None


def candidate_pawn_moves(square: Square, position: Position) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward.
    - It can move by two in their first move (so when on their starting rank), if both squares are free
    - takes diagonally, including on the en passant square
    """
    color = position.piece(square).color
    direction = PAWN_DIRECTION[color]
    moves: list[Move] = []

    # Pawn pushes
    one_step = square.offset(0, direction)
    if one_step.is_within_bounds() and position.is_empty(one_step):
        moves.append(
            Move(square, one_step, promote_to=_promotion_for(one_step, color))
        )
        two_steps = square.offset(0, 2 * direction)
        if square.rank == PAWN_HOME_RANK[color] and position.is_empty(two_steps):
            moves.append(Move(square, two_steps, is_double_push=True))

    # pawns take diagonally:
    opponent_color = opposite(color)
    for df in (-1, 1):
        target_square = square.offset(df, direction)
        if not target_square.is_within_bounds():
            continue

        if position.piece(target_square).color == opponent_color:
            moves.append(
                Move(
                    square,
                    target_square,
                    is_capture=True,
                    promote_to=_promotion_for(target_square, color),
                )
            )
        elif target_square == position.en_passant_square:
            moves.append(
                Move(square, target_square, is_capture=True, is_en_passant=True)
            )
    return moves


KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]


def candidate_knight_moves(square: Square, position: Position) -> list[Move]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, position, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, position: Position) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, position, DIAGONALS)


def candidate_rook_moves(square: Square, position: Position) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, position, STRAIGHTS)


def candidate_queen_moves(square: Square, position: Position) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(square, position, STRAIGHTS + DIAGONALS)


def candidate_king_moves(square: Square, position: Position) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move, see `candidate_castling_moves()`.
    """
    moves = single_step_move(square, position, STRAIGHTS + DIAGONALS)
    moves.extend(candidate_castling_moves(square, position))
    return moves


def candidate_castling_moves(square: Square, position: Position) -> list[Move]:
    """
    Castling candidates for the king standing on the given square.
    ---

    **generated if**

    * The king has not moved (since the position was loaded).
    * Castling rights for that direction are not yet revoked.
    * The king stands on its starting square. (An extra condition on top of rights + empty path:
      a FEN with castling rights but a displaced king would otherwise let the king "castle" from anywhere.)
    * Every square in between the king and the rook is empty.

    NOTE: Whether the king is in check, or passes through an attacked square, is NOT considered.
    Only the safety of the square the king lands on gets checked (by the legality filter).
    """
    king = position.piece(square)
    if king.has_moved:
        return []

    moves: list[Move] = []
    for direction in castling_directions(king.color):
        rule = CASTLING_RULES[direction]
        if not position.castling_rights[direction] or square != rule.king_from:
            continue
        if any(not position.is_empty(sq) for sq in castling_path(direction)):
            continue
        moves.append(Move(rule.king_from, rule.king_to, castling_direction=direction))
    return moves


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Position], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def candidate_moves(position: Position, square: Square) -> list[Move]:
    """Pseudo-legal moves of whatever piece stands on the square (an empty square has none)."""
    piece = position.piece(square)
    if piece.is_empty:
        return []
    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(square, position)


def candidate_moves_for_color(position: Position, color: Color) -> list[Move]:
    """Concatenation of the pseudo-legal moves of every piece of that color."""
    moves: list[Move] = []
    for square in position.locate_color(color):
        moves.extend(candidate_moves(position, square))
    return moves


# -- PAWN PROMOTION MOVES --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]
