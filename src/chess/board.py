"""The Game board: the configuration of pieces on the 8x8 grid and the first field of a FEN string."""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square


@dataclass
class Board:
    position: dict[Square, Piece]

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using a given FEN string.

        That is, we supply the first part of the FEN string that denotes the board position
        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces. Again, left-to-right reads a1-h1.

        NOTE: Every piece starts with has_moved = False, the FEN string has no room for it.
        """
        position = cls.empty().position
        fen_by_ranks = fen_str.split("/")
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 1
            for character in fen_one_rank:
                if character.isalpha():
                    # simple case: a letter directly denotes the piece that should be created
                    position[Square(file, rank)] = Piece.from_fen(character)
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
        return cls(position)

    @classmethod
    def empty(cls) -> Self:
        return cls(
            {
                Square(file, rank): Piece.empty()
                for rank in range(1, BOARD_DIMENSIONS[1] + 1)
                for file in range(1, BOARD_DIMENSIONS[0] + 1)
            }
        )

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece(Square(file, rank))

            if not piece.is_empty:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece(self, square: Square) -> Piece:
        return self.position[square]

    def is_empty(self, square: Square) -> bool:
        return self.piece(square).is_empty

    def locate_color(self, color: Color) -> list[Square]:
        """Squares occupied by the given color, read like a FEN string: 8th rank first, a-file first."""
        return [
            Square(file, rank)
            for rank in range(BOARD_DIMENSIONS[1], 0, -1)
            for file in range(1, BOARD_DIMENSIONS[0] + 1)
            if self.position[Square(file, rank)].color == color
        ]

    def locate_king(self, color: Color) -> Optional[Square]:
        """None when that player has no king on the board (e.g. in hand-made test positions)."""
        return next(
            (
                square
                for square in self.locate_color(color)
                if self.piece(square).type == PieceType.KING
            ),
            None,
        )

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.position[square] = piece

    def remove_piece(self, square: Square) -> None:
        self.position[square] = Piece.empty()

    def move_piece(self, from_square: Square, to_square: Square) -> None:
        """Update the position on the board. Whatever stood on the target square is gone."""
        piece_that_moved = self.piece(from_square)
        piece_that_moved.has_moved = True
        self.position[from_square] = Piece.empty()
        self.position[to_square] = piece_that_moved

    def promote_piece(self, square: Square, to: PieceType) -> None:
        self.piece(square).promote_to(to)
