"""Unit tests for src/db/sql_repository.py"""

from uuid import uuid4

from sqlalchemy.orm import Session

from src.core.models import GameModel, HistoryRecord, RedoRecord
from src.db.sql_repository import SQLGameRepository

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
AFTER_E4_E5 = "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq e6 0 2"

E4 = HistoryRecord(move_uci="e2e4", notation="e4", fen_before=STARTING_FEN)
E5 = HistoryRecord(move_uci="e7e5", notation="e5", fen_before=AFTER_E4)


def test_create_game(db_session_repo: Session) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    model = GameModel(current_fen=AFTER_E4_E5, history=[E4, E5])

    repo = SQLGameRepository(db_session_repo)
    record_in_db, _ = repo.create_game(model)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == model


def test_get_game_by_id(db_session_repo: Session) -> None:
    """Create a game, then fetch it from db."""
    model = GameModel(
        current_fen=AFTER_E4,
        history=[E4],
        redo=[RedoRecord(fen=AFTER_E4_E5, **E5)],
    )

    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(model)
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game
    assert game_found.redo[0]["fen"] == AFTER_E4_E5


def test_get_unknown_game(db_session_repo: Session) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    # Now do it with creating a game, but retrieving from the wrong ID
    repo.create_game(GameModel(current_fen=STARTING_FEN))
    assert repo.get_game(uuid4()) is None


def test_update_game(db_session_repo: Session) -> None:
    """
    Update an earlier created record.
    """
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(GameModel(current_fen=STARTING_FEN))

    after = GameModel(
        current_fen=AFTER_E4_E5,
        history=[E4, E5],
        status="resigned",
        winner="black",
    )
    updated_game = repo.update_game(game_id, after)
    assert updated_game is not None
    assert updated_game == after


def test_consecutive_game_updates(db_session_repo: Session) -> None:
    """Play, undo and redo: the history and redo lists shrink and grow between updates."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(GameModel(current_fen=STARTING_FEN))

    played = GameModel(current_fen=AFTER_E4_E5, history=[E4, E5])
    undone = GameModel(
        current_fen=AFTER_E4,
        history=[E4],
        redo=[RedoRecord(fen=AFTER_E4_E5, **E5)],
    )
    redone = GameModel(current_fen=AFTER_E4_E5, history=[E4, E5])

    repo.update_game(game_id, played)
    repo.update_game(game_id, undone)
    assert repo.get_game(game_id) == undone
    repo.update_game(game_id, redone)

    after_all_updates = repo.get_game(game_id)
    assert after_all_updates is not None
    assert after_all_updates == redone
    assert after_all_updates.redo == []


def test_stored_lists_are_copies(db_session_repo: Session) -> None:
    """Mutating the model after storing it does not change the record"""
    history = [E4]
    model = GameModel(current_fen=AFTER_E4, history=history)

    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(model)
    history.append(E5)

    game_found = repo.get_game(game_id)
    assert game_found is not None
    assert game_found.history == [E4]


def test_attempt_updating_unknown_game(db_session_repo: Session) -> None:
    """
    the update_game() method should break early and return None
    """
    repo = SQLGameRepository(db_session_repo)
    updated_game = repo.update_game(uuid4(), GameModel(current_fen=AFTER_E4))
    assert updated_game is None


def test_delete_game(db_session_repo: Session) -> None:
    """Record of the game should no longer exist after deletion"""
    repo = SQLGameRepository(db_session_repo)
    created_game, game_id = repo.create_game(
        GameModel(current_fen=AFTER_E4, history=[E4])
    )
    deleted_game = repo.delete_game(game_id)

    # the correct game should be deleted
    assert deleted_game == created_game

    # The game should no longer be available in db
    assert repo.get_game(game_id) is None


def test_attempt_deleting_unknown_game(db_session_repo: Session) -> None:
    """
    the delete_game() method should break early and return None
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.delete_game(uuid4()) is None
