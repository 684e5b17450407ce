"""Unit tests for src/chess/fen.py"""

import pytest

from src.chess.castling import CastlingDirection
from src.chess.fen import (
    STARTING_FEN,
    VALID_CASTLING_ENCODINGS,
    castling_from_fen,
    castling_to_fen,
    is_valid_castling_rights,
    is_valid_color_code,
    is_valid_en_passant,
    is_valid_fen,
    is_valid_move_counter,
    is_valid_position,
)

CASTLING_CASES = [
    ("KQkq", {direction: True for direction in CastlingDirection}),
    (
        "KQk",
        {
            CastlingDirection.WHITE_KING_SIDE: True,
            CastlingDirection.WHITE_QUEEN_SIDE: True,
            CastlingDirection.BLACK_KING_SIDE: True,
            CastlingDirection.BLACK_QUEEN_SIDE: False,
        },
    ),
    (
        "Qq",
        {
            CastlingDirection.WHITE_KING_SIDE: False,
            CastlingDirection.WHITE_QUEEN_SIDE: True,
            CastlingDirection.BLACK_KING_SIDE: False,
            CastlingDirection.BLACK_QUEEN_SIDE: True,
        },
    ),
    ("-", {direction: False for direction in CastlingDirection}),
]


@pytest.mark.parametrize("fen, expected_rights", CASTLING_CASES)
def test_castling_from_fen(
    fen: str, expected_rights: dict[CastlingDirection, bool]
) -> None:
    """Check encoding of castling rights is correctly decoded"""
    assert castling_from_fen(fen) == expected_rights


@pytest.mark.parametrize("expected_fen, rights", CASTLING_CASES)
def test_castling_to_fen(
    expected_fen: str, rights: dict[CastlingDirection, bool]
) -> None:
    """Check castling rights get correctly encoded"""
    assert castling_to_fen(rights) == expected_fen


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "r3k2r/pppq1ppp/2npbn2/4p3/2B1P3/2NP1N2/PPP2PPP/R1BQ1RK1 b kq - 3 9",
        "8/8/8/8/8/8/8/8 w - - 0 1",
        "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq e6 0 2",
    ],
)
def test_valid_fen(fen: str) -> None:
    assert is_valid_fen(fen)


@pytest.mark.parametrize(
    "fen",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",  # only 5 fields
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",  # bogus color
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkqX - 0 1",  # bogus castling
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e9 0 1",  # bogus en passant square
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - -1 1",  # negative clock
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 0",  # full move number starts at 1
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBKKBNR w KQkq - 0 1",  # two white kings
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 ²",  # superscript digit as move number
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - ² 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e² 0 1",
        "mock mock mock mock mock mock",
        "",
    ],
)
def test_invalid_fen(fen: str) -> None:
    assert not is_valid_fen(fen)


@pytest.mark.parametrize(
    "position",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR/RNBQKBNR",  # an additional rank
        "rnbqkbnr/pppppppp/8/",  # not enough ranks
        "rnbqkbnr/pppppppp/6/23/42/34/PPPPPPPP/RNBQKBNR",  # empty squares exceed number of files
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNRRRR",  # number of pieces in the rank exceeds number of files
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/WRTYUIOM",  # bogus codes for the pieces
        "rn@q#bnr/p-ppp-pp/8/8/8/8/PPPPPPPP/RNBQKBNR",  # bogus characters for the pieces
        "rnbqkbnr/pppppppp/²/8/8/8/PPPPPPPP/RNBQKBNR",  # non-ASCII digit for empty squares
    ],
)
def test_invalid_position(position: str) -> None:
    """Check these bogus positions are invalid"""
    assert not is_valid_position(position)


@pytest.mark.parametrize("castling", VALID_CASTLING_ENCODINGS)
def test_valid_castling(castling: str) -> None:
    assert is_valid_castling_rights(castling)


@pytest.mark.parametrize("castling", ["KKQ", "KQkqKQkq", "----", "%$#&", "K-kq"])
def test_invalid_castling(castling: str) -> None:
    assert not is_valid_castling_rights(castling)


def test_color_codes() -> None:
    assert is_valid_color_code("w")
    assert is_valid_color_code("b")
    assert not is_valid_color_code("white")


@pytest.mark.parametrize("en_passant", ["a1", "h8", "-"])
def test_valid_en_passant(en_passant: str) -> None:
    """include the encoding for 'no en passant square available'."""
    assert is_valid_en_passant(en_passant)


@pytest.mark.parametrize("en_passant", ["a9", "--", "e"])
def test_invalid_en_passant(en_passant: str) -> None:
    assert not is_valid_en_passant(en_passant)


def test_move_counter() -> None:
    assert is_valid_move_counter("0")
    assert is_valid_move_counter("42")
    assert not is_valid_move_counter("-3")
    assert not is_valid_move_counter("x")
    assert not is_valid_move_counter("²")
