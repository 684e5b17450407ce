"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the Service (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional, TypedDict


class HistoryRecord(TypedDict):
    """One applied move: UCI text, notation shown to the user and the FEN captured right before the move."""

    move_uci: str
    notation: str
    fen_before: str


class RedoRecord(TypedDict):
    """FEN captured at undo time, plus the history record that undo popped (re-appended on redo)."""

    fen: str
    move_uci: str
    notation: str
    fen_before: str


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between Service, DB, and Game layers."""

    current_fen: str
    history: list[HistoryRecord] = field(default_factory=list)
    redo: list[RedoRecord] = field(default_factory=list)
    status: str = "ongoing"
    winner: Optional[str] = None
