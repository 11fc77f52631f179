"""Unit tests for /chesscore/chess/board.py"""

import pytest

from chesscore.chess.board import STARTING_POSITION, Board
from chesscore.chess.pieces import Color, Piece, PieceType
from chesscore.chess.square import Square

EMPTY_FEN = "/".join(["8"] * 8)


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_POSITION,
        EMPTY_FEN,
        "r3k2r/pppq1ppp/2npbn2/4p3/2B1P3/2NP1N2/PPP2PPP/R1BQ1RK1",
        "8/8/8/3pP3/8/8/8/4K2k",
    ],
)
def test_fen_roundtrip(fen: str) -> None:
    assert Board.from_fen(fen).to_fen() == fen


def test_standard_setup() -> None:
    board = Board.standard()
    assert board.piece(Square.from_algebraic("e1")) == Piece(PieceType.KING, Color.WHITE)
    assert board.piece(Square.from_algebraic("d8")) == Piece(PieceType.QUEEN, Color.BLACK)
    assert board.piece(Square.from_algebraic("a7")) == Piece(PieceType.PAWN, Color.BLACK)
    assert board.is_empty(Square.from_algebraic("e4"))
    assert len(board.pieces_of(Color.WHITE)) == 16
    assert len(board.pieces_of(Color.BLACK)) == 16


def test_rank_zero_is_blacks_back_rank() -> None:
    board = Board.standard()
    assert board.piece(Square(0, 0)) == Piece(PieceType.ROOK, Color.BLACK)
    assert board.piece(Square(7, 4)) == Piece(PieceType.KING, Color.WHITE)


def test_out_of_bounds_lookup_reports_no_piece() -> None:
    board = Board.standard()
    assert board.piece(Square(-1, 0)) is None
    assert board.is_empty(Square(8, 8))
    assert not board.in_bounds(Square(8, 0))
    assert board.in_bounds(Square(0, 7))


def test_place_and_clear_piece() -> None:
    board = Board.from_fen(EMPTY_FEN)
    d4 = Square.from_algebraic("d4")
    knight = Piece(PieceType.KNIGHT, Color.WHITE)
    board.place_piece(knight, d4)
    assert board.piece(d4) == knight
    board.place_piece(None, d4)
    assert board.is_empty(d4)


def test_relocate_returns_captured_piece() -> None:
    board = Board.from_fen("8/8/8/3p4/8/8/8/3R4")
    d1, d5 = Square.from_algebraic("d1"), Square.from_algebraic("d5")
    captured = board.relocate(d1, d5)
    assert captured == Piece(PieceType.PAWN, Color.BLACK)
    assert board.piece(d5) == Piece(PieceType.ROOK, Color.WHITE)
    assert board.is_empty(d1)


def test_relocate_to_empty_square() -> None:
    board = Board.standard()
    assert board.relocate(Square.from_algebraic("g1"), Square.from_algebraic("f3")) is None
    assert board.piece(Square.from_algebraic("f3")) == Piece(PieceType.KNIGHT, Color.WHITE)


def test_relocate_from_empty_square_clears_target() -> None:
    """Primitive: nothing gets validated"""
    board = Board.standard()
    captured = board.relocate(Square.from_algebraic("e4"), Square.from_algebraic("e2"))
    assert captured == Piece(PieceType.PAWN, Color.WHITE)
    assert board.is_empty(Square.from_algebraic("e2"))


def test_pieces_of_color() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/4P3/4K3")
    white = board.pieces_of(Color.WHITE)
    assert white == [
        (Square.from_algebraic("e2"), Piece(PieceType.PAWN, Color.WHITE)),
        (Square.from_algebraic("e1"), Piece(PieceType.KING, Color.WHITE)),
    ]
    assert board.pieces_of(Color.BLACK) == [
        (Square.from_algebraic("e8"), Piece(PieceType.KING, Color.BLACK))
    ]


def test_find_king() -> None:
    board = Board.standard()
    assert board.find_king(Color.WHITE) == Square.from_algebraic("e1")
    assert board.find_king(Color.BLACK) == Square.from_algebraic("e8")
    assert Board.from_fen(EMPTY_FEN).find_king(Color.WHITE) is None


def test_copy_is_independent() -> None:
    board = Board.standard()
    clone = board.copy()
    clone.relocate(Square.from_algebraic("e2"), Square.from_algebraic("e4"))
    assert board.to_fen() == STARTING_POSITION
    assert clone.to_fen() != STARTING_POSITION
    assert clone.position is not board.position


def test_count_material() -> None:
    assert Board.standard().count_material() == {Color.WHITE: 39, Color.BLACK: 39}
    board = Board.from_fen("4k3/8/8/8/8/8/3QP3/4K3")
    assert board.count_material() == {Color.WHITE: 10, Color.BLACK: 0}
