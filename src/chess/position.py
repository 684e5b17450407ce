"""
Representation of a single position on the board. The part that can be encoded in a FEN string.
Also implements how a (legal) move changes the position.
"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from src.chess.board import Board
from src.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    castling_directions,
    castling_rook_squares,
)
from src.chess.fen import STARTING_FEN, castling_from_fen, castling_to_fen, is_valid_fen
from src.chess.moves import PAWN_DIRECTION, Move
from src.chess.pieces import Color, Piece, PieceType, opposite
from src.chess.square import Square
from src.core.exceptions import InvalidFENError


@dataclass
class Position:
    """
    Data that can be constructed from a FEN string.
    ----

    FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
    The purpose of FEN is to provide all the necessary information to restart a game from a particular position.

    <board position string><active color><castling rights><en passant square><# half move clock><number turns played>

    * The string to describe the board position is described in the Board class
    * The active color is either "w" or "b"
    * Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
        In the starting position: KQkq (all rights available), and as rights get revoked a "-" is used instead of the designated letter.
    * The en passant square indicates the square a pawn can take on. If not available a "-" is used.
    * The half move clock counts the number of moves made since the last pawn move or capture. (Tracked, but never used to end the game)
    * The number of turns starts at 1 and increments after every move black makes.

    ex) The standard starting position has a FEN
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    i.e. it is white to move, all castling options available, no en passant square, no half moves and we are in the first turn.
    """

    board: Board
    color_to_move: Color
    castling_rights: dict[CastlingDirection, bool]
    en_passant_square: Optional[Square]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""

        # raise an exception if invalid FEN (before anything is built):
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        # extract the different components. FEN is space separated
        (
            position,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            num_turns,
        ) = fen.split()

        # Check which color is to move
        color_to_move = Color.WHITE if active_color == "w" else Color.BLACK

        # check the castling rights. Basically just check for "-", as the order in which it gets notated is always the same
        castling_rights = castling_from_fen(castling_str)

        # parse en passant target square
        en_passant_square = (
            Square.from_algebraic(en_passant_algebraic)
            if en_passant_algebraic != "-"
            else None
        )

        return cls(
            Board.from_fen(position),
            color_to_move,
            castling_rights,
            en_passant_square,
            int(half_move_clock),
            int(num_turns),
        )

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data (has_moved flags are not part of it)"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        castling_str = castling_to_fen(self.castling_rights)

        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return f"{self.board.to_fen()} {active_color} {castling_str} {en_passant_algebraic} {self.half_move_clock} {self.num_turns}"

    def copy(self) -> Self:
        """Throwaway copy, to try out a move without touching this position."""
        return deepcopy(self)

    # -- Board access, used by the movement rules --
    def piece(self, square: Square) -> Piece:
        return self.board.piece(square)

    def is_empty(self, square: Square) -> bool:
        return self.board.is_empty(square)

    def locate_color(self, color: Color) -> list[Square]:
        return self.board.locate_color(color)

    # -- MOVE APPLIER --
    def apply_move(self, move: Move) -> None:
        """
        Update the position with the move (in place)
        -----

        1. update the board (NOTE: castling moves both king and rook, en passant removes a pawn next to the moving one)
        2. promote the pawn, if needed
        3. revoke castling rights (never restored)
        4. set / clear the en passant square
        5. update the move counters
        6. the other player is to move
        """
        player_color = self.color_to_move
        moving_piece = self.piece(move.from_square)
        captured_piece = self.piece(move.to_square)

        self.board.move_piece(move.from_square, move.to_square)
        if move.is_en_passant:
            self.board.remove_piece(self._en_passant_victim(move, moving_piece.color))
        if move.castling_direction:
            rook_from, rook_to = castling_rook_squares(move.castling_direction)
            self.board.move_piece(rook_from, rook_to)
        if move.promote_to:
            self.board.promote_piece(move.to_square, to=move.promote_to)

        self._revoke_castling_rights_if_needed(move, moving_piece, captured_piece)

        self.en_passant_square = (
            self._en_passant_target(move, moving_piece.color)
            if move.is_double_push
            else None
        )

        is_capture = move.is_capture or not captured_piece.is_empty
        if moving_piece.type == PieceType.PAWN or is_capture:
            self.half_move_clock = 0
        else:
            self.half_move_clock += 1

        if player_color == Color.BLACK:
            self.num_turns += 1

        # NOTE update color to move AFTER everything that depends on who made the move
        self.color_to_move = opposite(player_color)

    def _revoke_castling_rights_if_needed(
        self, move: Move, moving_piece: Piece, captured_piece: Piece
    ) -> None:
        """
        Checks which rights should get revoked
        ----

        1. If you are moving your king (castling included) --> revoke both
        2. If you are moving a rook from its starting square --> revoke the right in that direction
        3. If you are taking your opponent's rook on its starting square --> revoke that right of your opponent
        """
        if moving_piece.type == PieceType.KING:
            for direction in castling_directions(moving_piece.color):
                self.castling_rights[direction] = False

        for direction, rule in CASTLING_RULES.items():
            if moving_piece.type == PieceType.ROOK and move.from_square == rule.rook_from:
                self.castling_rights[direction] = False
            if captured_piece.type == PieceType.ROOK and move.to_square == rule.rook_from:
                self.castling_rights[direction] = False

    @staticmethod
    def _en_passant_target(move: Move, color: Color) -> Square:
        """The square the pawn skipped over with its double push"""
        return move.from_square.offset(0, PAWN_DIRECTION[color])

    @staticmethod
    def _en_passant_victim(move: Move, color: Color) -> Square:
        """The pawn taken en passant stands one rank behind the target square (seen from the capturing pawn)"""
        return move.to_square.offset(0, -PAWN_DIRECTION[color])


def simulate_move(position: Position, move: Move) -> Position:
    """The position after the move, leaving the given position untouched."""
    hypothetical = position.copy()
    hypothetical.apply_move(move)
    return hypothetical
