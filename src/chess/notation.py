"""
Short algebraic notation (best-effort) and PGN-like movetext.
---

Writer: <piece letter><x if capture><destination><=promotion letter><+ if the opponent is now in check>
* Pawns have no piece letter
* No disambiguation between two pieces of the same kind that can reach the same square
* No castling symbol (castling reads as a king move, e.g. 'Kg1') and no separate symbol for checkmate

Import works by matching tokens against the notation of the legal moves, see `Game.import_notation()`.
"""

import re
from datetime import date
from typing import Optional

from src.chess.legality import is_check
from src.chess.moves import Move
from src.chess.pieces import PIECE_TO_FEN, PieceType, opposite
from src.chess.position import Position, simulate_move

RESULT_TOKENS: tuple[str, ...] = ("1-0", "0-1", "1/2-1/2")
UNFINISHED_RESULT = "*"

_COMMENT = re.compile(r"\{[^}]*\}")
_VARIATION = re.compile(r"\([^)]*\)")
_MOVE_NUMBER = re.compile(r"\d+\.")
_CHECK_MARKS = re.compile(r"[+#]")


def to_notation(position: Position, move: Move) -> str:
    """Notation of a move that is about to be played in the given position"""
    moving_piece = position.piece(move.from_square)
    piece_letter = (
        "" if moving_piece.type == PieceType.PAWN else moving_piece.to_fen().upper()
    )
    is_capture = move.is_capture or not position.is_empty(move.to_square)
    capture_mark = "x" if is_capture else ""
    promotion = f"={PIECE_TO_FEN[move.promote_to].upper()}" if move.promote_to else ""

    after_move = simulate_move(position, move)
    check_mark = "+" if is_check(after_move, opposite(moving_piece.color)) else ""
    return f"{piece_letter}{capture_mark}{move.to_square.to_algebraic()}{promotion}{check_mark}"


def strip_check_marks(notation: str) -> str:
    return _CHECK_MARKS.sub("", notation)


def tokenize_movetext(text: str) -> list[str]:
    """
    Split movetext into move tokens.

    Removes {comments}, (variations), move numbers ('12.' and also '12...') and tag pair lines ('[Event "..."]').
    """
    lines = [line for line in text.splitlines() if not line.strip().startswith("[")]
    movetext = " ".join(lines)
    movetext = _COMMENT.sub(" ", movetext)
    movetext = _VARIATION.sub(" ", movetext)
    movetext = _MOVE_NUMBER.sub(" ", movetext)
    return [token for token in movetext.split() if token.strip(".")]


def is_result_token(token: str) -> bool:
    return token in RESULT_TOKENS


def matches_token(notation: str, token: str) -> bool:
    """Equal once check marks are removed, or one is a suffix of the other (e.g. 'exd5' matches 'xd5')"""
    ours = strip_check_marks(notation)
    theirs = strip_check_marks(token)
    return ours == theirs or ours.endswith(theirs) or theirs.endswith(ours)


def format_movetext(notations: list[str], result: str = UNFINISHED_RESULT) -> str:
    """Numbered move pairs: '1. e4 e5 2. Nf3 Nc6 *'"""
    pairs: list[str] = []
    for idx in range(0, len(notations), 2):
        move_number = idx // 2 + 1
        pairs.append(f"{move_number}. {' '.join(notations[idx:idx + 2])}")
    return " ".join(pairs + [result])


def format_headers(
    result: str,
    event: str = "Casual Game",
    site: str = "Local",
    white: str = "White",
    black: str = "Black",
    played_on: Optional[date] = None,
) -> str:
    """Seven tag roster. Round is not tracked."""
    played_on = played_on or date.today()
    tags = {
        "Event": event,
        "Site": site,
        "Date": played_on.strftime("%Y.%m.%d"),
        "Round": "-",
        "White": white,
        "Black": black,
        "Result": result,
    }
    return "\n".join(f'[{name} "{value}"]' for name, value in tags.items())


def export_movetext(
    notations: list[str], result: str = UNFINISHED_RESULT, **headers: str
) -> str:
    """Header block, blank line, movetext"""
    return f"{format_headers(result, **headers)}\n\n{format_movetext(notations, result)}\n"
