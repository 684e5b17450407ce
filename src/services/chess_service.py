"""Orchestration of communication from the UI/API side to business logic and persistence layers (and the reverse direction)."""

import logging
import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    ExportResponse,
    GameActionRequest,
    GameResponse,
    GetGameRequest,
    ImportNotationRequest,
    ImportResponse,
    LastMove,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
)
from src.chess.game import Game, Status
from src.chess.notation import RESULT_TOKENS, UNFINISHED_RESULT, export_movetext
from src.chess.pieces import Color, PieceType
from src.core import shared_types
from src.core.config import Settings, get_settings
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)

WHITE_WINS, BLACK_WINS, DRAW = RESULT_TOKENS

T = TypeVar("T")


class ChessService:
    """
    Orchestration of layers for chess game.

    NOTE: The Game itself is single-threaded. Every operation on a game id runs under that game's lock,
    so concurrent callers never interleave load -> change -> store of the same game.
    """

    def __init__(
        self, repository: GameRepository, settings: Optional[Settings] = None
    ) -> None:
        self.repo = repository
        self.settings = settings or get_settings()
        self._locks: defaultdict[UUID, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    # -- API routes logic ---
    def new_game(self, request: CreateGameRequest) -> GameResponse:
        """Create a new game (from the configured starting position unless the request brings a FEN)."""
        new_game = Game.new_game(request.starting_fen or self.settings.starting_fen)
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s", game_id)
        return self._create_game_response(game_id, Game.from_model(stored_game))

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Everything the board rendering needs: FEN, side to move, end of game message, undo/redo availability, last move.
        """
        with self._session_lock(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            return self._create_game_response(request.game_id, game)

    def legal_moves_from(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Move hints for the selected square (empty for malformed names, empty squares, or the opponent's pieces)."""
        with self._session_lock(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            moves = [] if game.is_over else game.legal_moves_from(request.square)
            return LegalMovesResponse(
                game_id=request.game_id,
                square=request.square,
                legal_moves=[move.to_uci() for move in moves],
                destinations=sorted({move.to_square.to_algebraic() for move in moves}),
            )

    def attempt_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. An illegal move is reported as not applied and changes nothing."""
        promote_to = PieceType[request.promote_to.name] if request.promote_to else None

        def _move(game: Game) -> MoveResponse:
            applied = game.attempt_move(
                request.from_square, request.to_square, promote_to
            )
            return MoveResponse(
                applied=applied,
                game=self._create_game_response(request.game_id, game),
            )

        return self._update(request.game_id, _move)

    def undo(self, request: GameActionRequest) -> GameResponse:
        """Take back the last move (nothing happens when there is none)."""
        return self._update(request.game_id, self._after(request.game_id, Game.undo))

    def redo(self, request: GameActionRequest) -> GameResponse:
        return self._update(request.game_id, self._after(request.game_id, Game.redo))

    def resign(self, request: GameActionRequest) -> GameResponse:
        """The side to move resigns, the opponent wins."""
        return self._update(request.game_id, self._after(request.game_id, Game.resign))

    def notation_history(self, request: GetGameRequest) -> list[str]:
        with self._session_lock(request.game_id):
            return Game.from_model(self._fetch_game(request.game_id)).notation_history

    def export_notation(self, request: GameActionRequest) -> ExportResponse:
        """Full movetext: header block + numbered move pairs."""
        with self._session_lock(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            movetext = export_movetext(
                game.notation_history,
                result=self._result_token(game),
                event=self.settings.pgn_event,
                site=self.settings.pgn_site,
                white=self.settings.pgn_white,
                black=self.settings.pgn_black,
            )
            return ExportResponse(game_id=request.game_id, movetext=movetext)

    def import_notation(self, request: ImportNotationRequest) -> ImportResponse:
        """Replace the game with the imported moves. Stopping at an unknown token is reported, not raised."""

        def _import(game: Game) -> ImportResponse:
            result = game.import_notation(request.movetext)
            return ImportResponse(
                applied_moves=result.applied,
                unmatched_token=result.unmatched_token,
                game=self._create_game_response(request.game_id, game),
            )

        return self._update(request.game_id, _import)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        with self._session_lock(request.game_id):
            self.repo.delete_game(request.game_id)
        self._forget_lock(request.game_id)

    # -- Internal helpers --
    @contextmanager
    def _session_lock(self, game_id: UUID) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks[game_id]
        with lock:
            try:
                yield
            except RepositoryError:
                # unknown game id: no lock is kept for it
                self._forget_lock(game_id)
                raise

    def _forget_lock(self, game_id: UUID) -> None:
        with self._locks_guard:
            self._locks.pop(game_id, None)

    def _update(self, game_id: UUID, change: Callable[[Game], T]) -> T:
        """Load the game, change it, store it. All under the game's lock."""
        with self._session_lock(game_id):
            game = Game.from_model(self._fetch_game(game_id))
            response = change(game)
            self.repo.update_game(game_id, game.to_model())
            return response

    def _after(
        self, game_id: UUID, action: Callable[[Game], None]
    ) -> Callable[[Game], GameResponse]:
        """Wrap a Game command so that it answers with the resulting game state."""

        def _change(game: Game) -> GameResponse:
            action(game)
            return self._create_game_response(game_id, game)

        return _change

    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert info of the Game to a GameResponse (for game with given ID.)"""
        last_move = game.last_move
        return GameResponse(
            game_id=game_id,
            fen_state=game.position.to_fen(),
            starting_state=game.starting_fen,
            side_to_move=shared_types.Color[game.color_to_move.name],
            status=shared_types.Status[game.status.name],
            message=game.message,
            in_check=game.is_check(),
            can_undo=game.can_undo,
            can_redo=game.can_redo,
            last_move=(
                LastMove(
                    from_square=last_move.from_square.to_algebraic(),
                    to_square=last_move.to_square.to_algebraic(),
                )
                if last_move
                else None
            ),
            move_history=game.notation_history,
        )

    def _result_token(self, game: Game) -> str:
        if game.status == Status.STALEMATE:
            return DRAW
        if game.winner == Color.WHITE:
            return WHITE_WINS
        if game.winner == Color.BLACK:
            return BLACK_WINS
        return UNFINISHED_RESULT

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
