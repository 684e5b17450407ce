"""unit tests for src/chess/castling.py"""

import pytest

from src.chess.castling import (
    CastlingDirection,
    CastlingSquares,
    castling_directions,
    castling_path,
    castling_rook_squares,
    squares_between_on_rank,
)
from src.chess.pieces import Color
from src.chess.square import Square


def test_castling_squares_creation() -> None:
    """Test one case, just to have a little contract stating: 'I want to be able to create this dataclass'"""
    castling_squares = CastlingSquares.from_algebraic("e1", "g1", "h1", "f1")
    assert castling_squares.king_from == Square.from_algebraic("e1")
    assert castling_squares.king_to == Square.from_algebraic("g1")
    assert castling_squares.rook_from == Square.from_algebraic("h1")
    assert castling_squares.rook_to == Square.from_algebraic("f1")


def test_direction_color_and_side() -> None:
    assert CastlingDirection.WHITE_KING_SIDE.color == Color.WHITE
    assert CastlingDirection.BLACK_QUEEN_SIDE.color == Color.BLACK
    assert CastlingDirection.BLACK_KING_SIDE.is_king_side
    assert not CastlingDirection.WHITE_QUEEN_SIDE.is_king_side


def test_castling_directions_per_color() -> None:
    assert castling_directions(Color.WHITE) == [
        CastlingDirection.WHITE_KING_SIDE,
        CastlingDirection.WHITE_QUEEN_SIDE,
    ]
    assert castling_directions(Color.BLACK) == [
        CastlingDirection.BLACK_KING_SIDE,
        CastlingDirection.BLACK_QUEEN_SIDE,
    ]


def test_rook_squares() -> None:
    rook_from, rook_to = castling_rook_squares(CastlingDirection.BLACK_QUEEN_SIDE)
    assert rook_from.to_algebraic() == "a8"
    assert rook_to.to_algebraic() == "d8"


@pytest.mark.parametrize(
    "direction, expected",
    [
        (CastlingDirection.WHITE_KING_SIDE, ["f1", "g1"]),
        (CastlingDirection.WHITE_QUEEN_SIDE, ["d1", "c1", "b1"]),
        (CastlingDirection.BLACK_KING_SIDE, ["f8", "g8"]),
        (CastlingDirection.BLACK_QUEEN_SIDE, ["d8", "c8", "b8"]),
    ],
)
def test_castling_path(direction: CastlingDirection, expected: list[str]) -> None:
    """Squares strictly between king and rook"""
    assert [sq.to_algebraic() for sq in castling_path(direction)] == expected


def test_squares_between_requires_same_rank() -> None:
    with pytest.raises(ValueError):
        squares_between_on_rank(Square.from_algebraic("a1"), Square.from_algebraic("a2"))


def test_squares_between_same_square() -> None:
    e1 = Square.from_algebraic("e1")
    assert squares_between_on_rank(e1, e1) == []
