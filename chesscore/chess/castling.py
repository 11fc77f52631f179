"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Self

from chesscore.chess.pieces import Color
from chesscore.chess.square import Square


class CastlingSide(StrEnum):
    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"


class CastlingDirection(Enum):
    """The four castling rights. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @classmethod
    def of(cls, color: Color, side: CastlingSide) -> Self:
        letter = "K" if side == CastlingSide.KINGSIDE else "Q"
        return cls(letter if color == Color.WHITE else letter.lower())

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK

    @property
    def side(self) -> CastlingSide:
        return CastlingSide.KINGSIDE if self.value in "Kk" else CastlingSide.QUEENSIDE


CastlingRights = dict[CastlingDirection, bool]

# FEN lists the rights in this order
CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.

    `between` are the squares that must be empty, `king_path` the squares the king passes
    through (its origin excluded) that may not be attacked.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square
    between: tuple[Square, ...]
    king_path: tuple[Square, ...]

    @classmethod
    def from_algebraic(
        cls, k_from: str, k_to: str, r_from: str, r_to: str, between: str, path: str
    ) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        return cls(
            king_from=Square.from_algebraic(k_from),
            king_to=Square.from_algebraic(k_to),
            rook_from=Square.from_algebraic(r_from),
            rook_to=Square.from_algebraic(r_to),
            between=tuple(Square.from_algebraic(sq) for sq in between.split()),
            king_path=tuple(Square.from_algebraic(sq) for sq in path.split()),
        )


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1", "f1 g1", "f1 g1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1", "d1 c1 b1", "d1 c1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8", "f8 g8", "f8 g8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8", "d8 c8 b8", "d8 c8"
    ),
}


def all_castling_rights() -> CastlingRights:
    return {direction: True for direction in CastlingDirection}


def castling_from_fen(castle_fen: str) -> CastlingRights:
    """parse the part of the FEN string that encodes castling rights"""
    return {
        direction: (direction.value in castle_fen) for direction in CastlingDirection
    }


def castling_to_fen(castling_rights: CastlingRights) -> str:
    """create the part of the FEN string that encodes castling rights"""
    castling_chars = "".join(
        [direction.value for direction in CASTLING_ORDER if castling_rights[direction]]
    )
    return castling_chars or "-"
