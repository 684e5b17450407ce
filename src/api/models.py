"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType, Status


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split()
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value.strip()


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class GameActionRequest(BaseModel):
    """Undo, redo, resign and export only need to know which game."""

    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: str


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        def _is_algebraic_notation(value: str) -> bool:
            if len(value) != 2:
                return False

            first_character = value[0]
            second_character = value[1]
            if not value.isascii():
                return False
            if not (first_character.isalpha() and second_character.isdecimal()):
                return False
            return True

        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


class ImportNotationRequest(BaseModel):
    game_id: UUID
    movetext: str


# --- RESPONSE MODELS ---
class LastMove(BaseModel):
    """Squares to highlight"""

    from_square: str
    to_square: str


class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    starting_state: str
    side_to_move: Color
    status: Status
    message: Optional[str] = None
    in_check: bool
    can_undo: bool
    can_redo: bool
    last_move: Optional[LastMove] = None
    move_history: list[str]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: str
    legal_moves: list[str]
    destinations: list[str]


class MoveResponse(BaseModel):
    applied: bool
    game: GameResponse


class ImportResponse(BaseModel):
    applied_moves: list[str]
    unmatched_token: Optional[str] = None
    game: GameResponse


class ExportResponse(BaseModel):
    game_id: UUID
    movetext: str
