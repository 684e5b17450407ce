"""
The Game class will be the entrypoint into the domain layer for the service layer.
It owns the live Position, the history of applied moves and the redo stack, and orchestrates
everything required to play a turn: legality, applying the move, detecting the end of the game.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional, Self

from src.chess.fen import STARTING_FEN
from src.chess.legality import has_legal_move, is_check, legal_moves, legal_moves_for_color
from src.chess.moves import PROMOTION_OPTIONS, Move
from src.chess.notation import (
    is_result_token,
    matches_token,
    strip_check_marks,
    to_notation,
    tokenize_movetext,
)
from src.chess.pieces import Color, PieceType, opposite
from src.chess.position import Position
from src.chess.square import Square, parse_square
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidSquareError,
)
from src.core.models import GameModel, HistoryRecord, RedoRecord

logger = logging.getLogger(__name__)


class Status(Enum):
    ONGOING = auto()
    CHECKMATE = auto()
    STALEMATE = auto()
    RESIGNED = auto()


@dataclass
class HistoryEntry:
    """An applied move, how it was written down and the FEN right before it was played."""

    move: Move
    notation: str
    fen_before: str


@dataclass
class RedoEntry:
    """Snapshot taken when undoing, together with the history entry undo removed."""

    fen: str
    entry: HistoryEntry


@dataclass
class ImportResult:
    """
    Outcome of replaying movetext.
    An unmatched token is not an error: the moves before it stay on the board.
    """

    applied: list[str] = field(default_factory=list)
    unmatched_token: Optional[str] = None

    @property
    def complete(self) -> bool:
        return self.unmatched_token is None


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    position: Position
    history: list[HistoryEntry] = field(default_factory=list)
    redo_stack: list[RedoEntry] = field(default_factory=list)
    status: Status = Status.ONGOING
    winner: Optional[Color] = None

    @classmethod
    def new_game(cls, starting_fen: Optional[str] = None) -> Self:
        """Start a game from the standard starting position, or from the supplied FEN."""
        game = cls(Position.from_fen(starting_fen or STARTING_FEN))
        game._update_game_status()
        return game

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        status_name = model.status.replace(" ", "_").upper()
        if status_name not in Status.__members__:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join([status.name.lower() for status in Status])}"
            )

        history = [_entry_from_record(record) for record in model.history]
        redo_stack = [
            RedoEntry(fen=record["fen"], entry=_entry_from_record(record))
            for record in model.redo
        ]
        winner = Color[model.winner.upper()] if model.winner else None
        return cls(
            position=Position.from_fen(model.current_fen),
            history=history,
            redo_stack=redo_stack,
            status=Status[status_name],
            winner=winner,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            current_fen=self.position.to_fen(),
            history=[_record_from_entry(entry) for entry in self.history],
            redo=[
                RedoRecord(fen=redo.fen, **_record_from_entry(redo.entry))
                for redo in self.redo_stack
            ],
            status=self.status.name.lower(),
            winner=self.winner.name.lower() if self.winner else None,
        )

    def reset(self, starting_fen: Optional[str] = None) -> None:
        """
        Start over (newGame). Clears history and redo stack.
        NOTE: The FEN is parsed first, so an invalid FEN leaves the current game untouched.
        """
        position = Position.from_fen(starting_fen or STARTING_FEN)
        self.position = position
        self.history = []
        self.redo_stack = []
        self._update_game_status()
        logger.info("New game from %s", self.position.to_fen())

    # --- QUERIES ---
    @property
    def color_to_move(self) -> Color:
        return self.position.color_to_move

    @property
    def is_over(self) -> bool:
        return self.status != Status.ONGOING

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    @property
    def starting_fen(self) -> str:
        """Before the first move gets played, the starting FEN equals the current FEN. Otherwise it is the first recorded FEN."""
        return self.history[0].fen_before if self.history else self.position.to_fen()

    @property
    def last_move(self) -> Optional[Move]:
        return self.history[-1].move if self.history else None

    @property
    def notation_history(self) -> list[str]:
        return [entry.notation for entry in self.history]

    @property
    def message(self) -> Optional[str]:
        """Human readable description of how the game ended"""
        loser = opposite(self.winner) if self.winner else self.color_to_move
        if self.status == Status.CHECKMATE:
            return f"{_color_name(loser).capitalize()} is checkmated, {_color_name(opposite(loser))} wins"
        if self.status == Status.STALEMATE:
            return "Stalemate (draw)"
        if self.status == Status.RESIGNED:
            return f"{_color_name(loser).capitalize()} resigned, {_color_name(opposite(loser))} wins"
        return None

    def is_check(self) -> bool:
        """Is the side to move in check?"""
        return is_check(self.position, self.color_to_move)

    def legal_moves(self) -> list[Move]:
        """All legal moves of the side to move"""
        return legal_moves_for_color(self.position, self.color_to_move)

    def selected_moves(self, square: Square) -> list[Move]:
        """Legal moves of the piece on the square. Only pieces of the side to move have any."""
        if self.position.piece(square).color != self.color_to_move:
            return []
        return legal_moves(self.position, square)

    def legal_moves_from(self, square_name: str) -> list[Move]:
        """Same as `selected_moves()`, from a square name. Malformed names have no moves."""
        square = parse_square(square_name)
        if square is None:
            logger.debug("Ignoring legal move request for square %r", square_name)
            return []
        return self.selected_moves(square)

    # --- COMMANDS ---
    def make_move(self, move: Move) -> HistoryEntry:
        """
        Attempt to make a move
        -----

        1. look up the move among the legal moves from its starting square (this fills in capture / castling / en passant flags)
        2. apply the promotion choice, if any (queen if omitted)
        3. write down the move in notation, and the FEN before the move
        4. update the position
        5. clear the redo stack (no branching history)
        6. update game status (if needed)
        """
        self._assert_in_progress()

        accepted_move = self._find_legal_move(move)
        entry = HistoryEntry(
            move=accepted_move,
            notation=to_notation(self.position, accepted_move),
            fen_before=self.position.to_fen(),
        )
        self.position.apply_move(accepted_move)
        self.history.append(entry)
        self.redo_stack.clear()
        self._update_game_status()
        return entry

    def make_move_uci(self, move_uci: str) -> HistoryEntry:
        return self.make_move(Move.from_uci(move_uci))

    def attempt_move(
        self,
        from_square: str,
        to_square: str,
        promote_to: Optional[PieceType] = None,
    ) -> bool:
        """
        Forgiving version of `make_move()` for the UI: True when the move was applied.
        Illegal moves, malformed square names or a finished game leave everything as it was.
        """
        try:
            move = Move(
                Square.from_algebraic(from_square),
                Square.from_algebraic(to_square),
                promote_to=promote_to,
            )
            self.make_move(move)
        except (InvalidSquareError, IllegalMoveError, GameStateError) as error:
            logger.debug("Move %s-%s rejected: %s", from_square, to_square, error)
            return False
        return True

    def undo(self) -> None:
        """Go back one move by restoring the FEN from before it. No-op without history."""
        if not self.history:
            logger.debug("Nothing to undo")
            return

        entry = self.history.pop()
        self.redo_stack.append(RedoEntry(fen=self.position.to_fen(), entry=entry))
        self.position = Position.from_fen(entry.fen_before)
        self._update_game_status()

    def redo(self) -> None:
        """Re-install the most recently undone position. No-op when nothing was undone."""
        if not self.redo_stack:
            logger.debug("Nothing to redo")
            return

        redo = self.redo_stack.pop()
        self.position = Position.from_fen(redo.fen)
        self.history.append(redo.entry)
        self._update_game_status()

    def resign(self) -> None:
        """The side to move gives up. The board stays as it is."""
        self._assert_in_progress()
        self.winner = opposite(self.color_to_move)
        self._change_status(Status.RESIGNED)
        logger.info("Game over: %s", self.message)

    def import_notation(self, text: str) -> ImportResult:
        """
        Replay movetext from the standard starting position
        ---

        Every token is matched against the notation of the legal moves. An exact match wins,
        otherwise the first suffix match (e.g. "exd5" for the written "xd5").
        Stops at a result token, or at the first token that matches no legal move.

        NOTE: Deviates from taking the first move that matches exactly or by suffix, in generation order.
        Pawn moves come first in board order, so that rule would read "Nf3" as the pawn move "f3".
        """
        self.reset()
        result = ImportResult()
        for token in tokenize_movetext(text):
            if token == "*":
                continue
            if is_result_token(token) or self.is_over:
                break

            move = self._match_token(token)
            if move is None:
                logger.warning("Could not play %r, import stopped after %d moves", token, len(result.applied))
                result.unmatched_token = token
                break

            result.applied.append(self.make_move(move).notation)

        logger.info("Imported %d moves", len(result.applied))
        return result

    # -- PRIVATE HELPERS ---
    def _assert_in_progress(self) -> None:
        if self.is_over:
            raise GameStateError(f"Game is not in progress. status: {self.status}")

    def _find_legal_move(self, move: Move) -> Move:
        """The generated move with the same from/to squares, with the requested promotion piece."""
        candidates = [
            legal
            for legal in self.selected_moves(move.from_square)
            if legal.to_square == move.to_square
        ]
        if not candidates:
            raise IllegalMoveError(f"Move not allowed: {move.to_uci()}")

        accepted_move = candidates[0]
        if accepted_move.promote_to and move.promote_to:
            if move.promote_to not in PROMOTION_OPTIONS:
                raise IllegalMoveError(
                    f"Cannot promote into {move.promote_to.name.lower()}: {move.to_uci()}"
                )
            accepted_move = replace(accepted_move, promote_to=move.promote_to)
        return accepted_move

    def _match_token(self, token: str) -> Optional[Move]:
        written = [(move, to_notation(self.position, move)) for move in self.legal_moves()]
        exact = strip_check_marks(token)
        for move, notation in written:
            if strip_check_marks(notation) == exact:
                return move
        return next(
            (move for move, notation in written if matches_token(notation, token)),
            None,
        )

    def _update_game_status(self) -> None:
        """Performs checks to see if game has ended and changes status accordingly.

        NOTE the position has already been updated. At this point the side to move is the opponent of the player that just moved.
        """
        self.winner = None
        if has_legal_move(self.position, self.color_to_move):
            self._change_status(Status.ONGOING)
        elif self.is_check():
            self.winner = opposite(self.color_to_move)
            self._change_status(Status.CHECKMATE)
        else:
            self._change_status(Status.STALEMATE)

        if self.is_over:
            logger.info("Game over: %s", self.message)

    def _change_status(self, new_status: Status) -> None:
        self.status = new_status


def _color_name(color: Color) -> str:
    return color.name.lower()


def _record_from_entry(entry: HistoryEntry) -> HistoryRecord:
    return HistoryRecord(
        move_uci=entry.move.to_uci(),
        notation=entry.notation,
        fen_before=entry.fen_before,
    )


def _entry_from_record(record: HistoryRecord) -> HistoryEntry:
    """
    UCI text does not tell if a move was a capture, castling or en passant.
    Recover those flags by matching against the moves generated in the position before the move.
    """
    stored_move = Move.from_uci(record["move_uci"])
    position_before = Position.from_fen(record["fen_before"])
    move = next(
        (
            legal
            for legal in legal_moves(position_before, stored_move.from_square)
            if legal.to_square == stored_move.to_square
        ),
        stored_move,
    )
    if stored_move.promote_to:
        move = replace(move, promote_to=stored_move.promote_to)
    return HistoryEntry(
        move=move, notation=record["notation"], fen_before=record["fen_before"]
    )
