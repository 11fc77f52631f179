"""Unit tests for chesscore/db/sql_repository.py"""

from uuid import uuid4

from sqlalchemy.orm import Session

from chesscore.chess.fen import STARTING_FEN
from chesscore.core.models import GameModel
from chesscore.core.shared_types import Status
from chesscore.db.sql_repository import SQLGameRepository

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
AFTER_E4_E5 = "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq e6 0 2"


def new_game_model() -> GameModel:
    return GameModel(starting_fen=STARTING_FEN, current_fen=STARTING_FEN)


def test_create_game(db_session_repo: Session) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    model = GameModel(
        starting_fen=STARTING_FEN,
        current_fen=AFTER_E4,
        moves=["e2e4"],
        status=Status.IN_PROGRESS,
    )

    repo = SQLGameRepository(db_session_repo)
    record_in_db, _ = repo.create_game(model)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == model


def test_get_game_by_id(db_session_repo: Session) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(new_game_model())
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game
    assert game_found.moves == []
    assert game_found.result is None


def test_get_unknown_game(db_session_repo: Session) -> None:
    """Should return None if ID does not match anything in database."""
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    # Now do it with creating a game, but retrieving from the wrong ID
    repo.create_game(new_game_model())
    assert repo.get_game(uuid4()) is None


def test_consecutive_game_updates(db_session_repo: Session) -> None:
    """The move list is a JSON column: every update has to be persisted, not just the first one."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(new_game_model())

    first_update = GameModel(
        starting_fen=STARTING_FEN, current_fen=AFTER_E4, moves=["e2e4"]
    )
    second_update = GameModel(
        starting_fen=STARTING_FEN, current_fen=AFTER_E4_E5, moves=["e2e4", "e7e5"]
    )

    assert repo.update_game(game_id, first_update) == first_update
    assert repo.update_game(game_id, second_update) == second_update

    after_all_updates = repo.get_game(game_id)
    assert after_all_updates is not None
    assert after_all_updates.moves == ["e2e4", "e7e5"]
    assert after_all_updates.current_fen == AFTER_E4_E5


def test_update_finished_game(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(new_game_model())

    finished = GameModel(
        starting_fen=STARTING_FEN,
        current_fen="rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3",
        moves=["f2f3", "e7e5", "g2g4", "d8h4"],
        status=Status.CHECKMATE,
        result="black wins by checkmate",
    )
    updated = repo.update_game(game_id, finished)
    assert updated is not None
    assert updated.status == Status.CHECKMATE
    assert updated.result == "black wins by checkmate"


def test_attempt_updating_unknown_game(db_session_repo: Session) -> None:
    """the update_game() method should break early and return None"""
    repo = SQLGameRepository(db_session_repo)
    assert repo.update_game(uuid4(), new_game_model()) is None


def test_delete_game(db_session_repo: Session) -> None:
    """Record of the game should no longer exist after deletion"""
    repo = SQLGameRepository(db_session_repo)
    created_game, game_id = repo.create_game(new_game_model())
    deleted_game = repo.delete_game(game_id)

    # the correct game should be deleted
    assert deleted_game == created_game

    # The game should no longer be available in db
    assert repo.get_game(game_id) is None


def test_attempt_deleting_unknown_game(db_session_repo: Session) -> None:
    """the delete_game() method should break early and return None"""
    repo = SQLGameRepository(db_session_repo)
    assert repo.delete_game(uuid4()) is None


def test_update_with_diverging_moves(db_session_repo: Session) -> None:
    """Plies that no longer match the record are replaced, a shorter record drops the rest."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(
        GameModel(starting_fen=STARTING_FEN, current_fen=AFTER_E4_E5, moves=["e2e4", "e7e5"])
    )

    repo.update_game(
        game_id,
        GameModel(starting_fen=STARTING_FEN, current_fen=AFTER_E4, moves=["e2e4"]),
    )
    stored = repo.get_game(game_id)
    assert stored is not None
    assert stored.moves == ["e2e4"]

    repo.update_game(
        game_id,
        GameModel(starting_fen=STARTING_FEN, current_fen="FEN", moves=["d2d4", "d7d5", "c2c4"]),
    )
    stored = repo.get_game(game_id)
    assert stored is not None
    assert stored.moves == ["d2d4", "d7d5", "c2c4"]


def test_list_games(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    assert repo.list_games() == []

    _, running_id = repo.create_game(new_game_model())
    _, finished_id = repo.create_game(
        GameModel(
            starting_fen=STARTING_FEN,
            current_fen=STARTING_FEN,
            status=Status.STALEMATE,
            result="Draw by stalemate",
        )
    )

    assert {game_id for game_id, _ in repo.list_games()} == {running_id, finished_id}
    stalemates = repo.list_games(Status.STALEMATE.value)
    assert [game_id for game_id, _ in stalemates] == [finished_id]
    assert stalemates[0][1].result == "Draw by stalemate"
    assert repo.list_games(Status.CHECKMATE.value) == []
