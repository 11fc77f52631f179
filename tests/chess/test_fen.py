"""Unit tests for /chesscore/chess/fen.py"""

from unittest.mock import patch

import pytest

from chesscore.chess.castling import CastlingDirection
from chesscore.chess.fen import (
    STARTING_FEN,
    FENState,
    export_fen,
    import_fen,
    is_valid_castling_rights,
    is_valid_en_passant,
    is_valid_fen,
    is_valid_move_counter,
    validate_fen,
)
from chesscore.chess.game import Game
from chesscore.chess.pieces import Color, Piece, PieceType
from chesscore.chess.square import Square
from chesscore.core.exceptions import FENErrorKind, InvalidFENError
from chesscore.core.shared_types import Status


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
        "r3k2r/pppq1ppp/2npbn2/4p3/2B1P3/2NP1N2/PPP2PPP/R1BQ1RK1 b kq - 3 9",
        "8/8/8/8/8/8/8/4K2k w - - 42 100",
        "4k3/8/8/8/8/8/8/R3K2R w KQ - 0 1",
    ],
)
def test_fen_roundtrip(fen: str) -> None:
    assert is_valid_fen(fen)
    assert export_fen(import_fen(fen)) == fen


def test_starting_fen_is_standard_game() -> None:
    game = import_fen(STARTING_FEN)
    assert game.board == Game().board
    assert export_fen(Game()) == STARTING_FEN


def test_import_sets_state() -> None:
    game = import_fen("rnbqkbnr/ppp1pppp/8/3pP3/8/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 2")
    assert game.current_player == Color.WHITE
    assert game.en_passant_target == Square(2, 3)
    assert (game.halfmove_clock, game.fullmove_number) == (0, 2)
    assert game.board.piece(Square.from_algebraic("d5")) == Piece(PieceType.PAWN, Color.BLACK)


def test_import_partial_castling_rights() -> None:
    game = import_fen("r3k2r/8/8/8/8/8/8/R3K2R b Kq - 5 20")
    assert game.current_player == Color.BLACK
    assert game.castling_rights == {
        CastlingDirection.WHITE_KING_SIDE: True,
        CastlingDirection.WHITE_QUEEN_SIDE: False,
        CastlingDirection.BLACK_KING_SIDE: False,
        CastlingDirection.BLACK_QUEEN_SIDE: True,
    }


def test_export_after_moves() -> None:
    game = Game()
    assert game.apply_move("e4")
    assert export_fen(game) == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    assert game.apply_move("Nf6")
    assert export_fen(game) == "rnbqkb1r/pppppppp/5n2/8/4P3/8/PPPP1PPP/RNBQKBNR w KQkq - 1 2"


def test_import_judges_the_side_to_move() -> None:
    # White to move here would be stalemate, but it is Black's turn
    with patch("chesscore.chess.game.logger") as mock_logger:
        game = import_fen("k7/8/8/8/8/1q6/8/K7 b - - 0 1")
    assert game.status == Status.IN_PROGRESS
    mock_logger.info.assert_not_called()


def test_import_terminal_position() -> None:
    game = import_fen("rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3")
    assert game.status == Status.CHECKMATE
    assert game.winner == Color.BLACK


@pytest.mark.parametrize(
    "fen, kind",
    [
        ("", FENErrorKind.FIELD_COUNT),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0", FENErrorKind.FIELD_COUNT),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 x", FENErrorKind.FIELD_COUNT),
        ("rnbqkbnr/pppppppp/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", FENErrorKind.RANK_COUNT),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX w KQkq - 0 1", FENErrorKind.PIECE_SYMBOL),
        ("rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", FENErrorKind.PIECE_SYMBOL),
        ("rnbqkbnr/ppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", FENErrorKind.FILE_COUNT),
        ("rnbqkbnr/pppppppp/8/8/45/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", FENErrorKind.FILE_COUNT),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR W KQkq - 0 1", FENErrorKind.ACTIVE_COLOR),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1", FENErrorKind.ACTIVE_COLOR),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w QK - 0 1", FENErrorKind.CASTLING),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkqK - 0 1", FENErrorKind.CASTLING),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e4 0 1", FENErrorKind.EN_PASSANT),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq i3 0 1", FENErrorKind.EN_PASSANT),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - -1 1", FENErrorKind.MOVE_COUNTER),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 0", FENErrorKind.MOVE_COUNTER),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - a 1", FENErrorKind.MOVE_COUNTER),
    ],
)
def test_invalid_fen_kind(fen: str, kind: FENErrorKind) -> None:
    with pytest.raises(InvalidFENError) as exc_info:
        validate_fen(fen)
    assert exc_info.value.kind == kind
    assert not is_valid_fen(fen)


def test_import_invalid_fen_raises() -> None:
    with pytest.raises(InvalidFENError):
        import_fen("not a fen at all")


def test_invalid_fen_error_is_value_error() -> None:
    with pytest.raises(ValueError, match="bad active color"):
        FENState.from_fen("8/8/8/8/8/8/8/4K2k z - - 0 1")


@pytest.mark.parametrize(
    "castling, expected",
    [("KQkq", True), ("Kq", True), ("-", True), ("k", True), ("", False), ("qk", False), ("KQ-", False)],
)
def test_is_valid_castling_rights(castling: str, expected: bool) -> None:
    assert is_valid_castling_rights(castling) is expected


@pytest.mark.parametrize(
    "en_passant, expected",
    [("-", True), ("e3", True), ("d6", True), ("e4", False), ("a1", False), ("", False), ("e33", False)],
)
def test_is_valid_en_passant(en_passant: str, expected: bool) -> None:
    assert is_valid_en_passant(en_passant) is expected


@pytest.mark.parametrize(
    "counter, minimum, expected",
    [("0", 0, True), ("0", 1, False), ("17", 1, True), ("-3", 0, False), ("1.5", 0, False), ("", 0, False)],
)
def test_is_valid_move_counter(counter: str, minimum: int, expected: bool) -> None:
    assert is_valid_move_counter(counter, minimum) is expected
