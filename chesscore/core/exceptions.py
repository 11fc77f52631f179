"""
Custom exceptions.

The rules engine answers ordinary gameplay input (even nonsense) with return values. Exceptions are
reserved for integration errors: corrupted FEN/save data, requests for games that do not exist, etc.
"""

from enum import StrEnum
from typing import Optional


class ChessError(Exception):
    """Base class of all errors raised by chesscore"""


class FENErrorKind(StrEnum):
    FIELD_COUNT = "wrong field count"
    RANK_COUNT = "wrong rank count"
    PIECE_SYMBOL = "invalid piece symbol"
    FILE_COUNT = "wrong file count in rank"
    ACTIVE_COLOR = "bad active color"
    CASTLING = "bad castling field"
    EN_PASSANT = "bad en-passant field"
    MOVE_COUNTER = "bad move counter"


class InvalidFENError(ChessError, ValueError):
    """A FEN string could not be imported. `kind` tells which part of it is broken."""

    def __init__(self, kind: FENErrorKind, fen: str, field: Optional[str] = None) -> None:
        self.kind = kind
        self.fen = fen
        self.field = field
        detail = f" ({field!r})" if field is not None else ""
        super().__init__(f"Invalid FEN, {kind}{detail}: {fen!r}")


class GameError(ChessError):
    """Game logic errors"""


class IllegalMoveError(GameError):
    """A move was rejected by the rules engine"""


class GameStateError(GameError):
    """The game is not in a state that allows the request (e.g. it already ended)"""


class RepositoryError(ChessError):
    """Persistence layer could not deliver (e.g. unknown game id)"""


class InvalidRequestError(ChessError, ValueError):
    """Request data failed validation"""
