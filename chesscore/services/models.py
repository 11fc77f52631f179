"""Requests and Response models of the ChessService"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from chesscore.chess.fen import validate_fen
from chesscore.chess.pieces import Color
from chesscore.chess.square import parse_square
from chesscore.core.exceptions import InvalidFENError, InvalidRequestError
from chesscore.core.shared_types import Status


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        value = value.strip()
        try:
            validate_fen(value)
        except InvalidFENError as error:
            raise InvalidRequestError(str(error)) from error
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: Optional[str] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if parse_square(value) is None:
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value.lower()


class MoveRequest(BaseModel):
    game_id: UUID
    notation: str

    @field_validator("notation")
    @classmethod
    def validate_notation(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("A move needs some notation.")
        return value.strip()


class DeleteGameRequest(BaseModel):
    game_id: UUID


class ListGamesRequest(BaseModel):
    status: Optional[Status] = None


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    starting_state: str
    move_history: list[str]
    color_to_move: Color
    in_check: bool
    status: Status
    result: Optional[str] = None
    last_move: Optional[str] = None


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]


class GameSummary(BaseModel):
    game_id: UUID
    fen_state: str
    plies: int
    status: Status
    result: Optional[str] = None
