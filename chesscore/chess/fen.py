"""
FEN, or Forsyth-Edwards Notation: import/export of a full game state.

<board position> <active color> <castling rights> <en passant square> <half move clock> <full move number>

* The board position lists the ranks from Black's back rank (8th) to White's (1st), separated by slashes.
  Within a rank, files run a-h. Letters are pieces (capitals for White), digits count empty squares.
* The active color is either "w" or "b"
* Castling rights: a subset of "KQkq" (capitals for White, k = king side, q = queen side) or "-" if all are gone.
* The en passant square is the square a pawn could take on. If not available a "-" is used.
* The half move clock counts the plies since the last pawn move or capture (fifty-move rule).
* The full move number starts at 1 and increments after every move Black makes.

ex) The standard starting position has a FEN
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1

Import is all-or-nothing: a malformed string raises InvalidFENError and no Game is built.
"""

import re
from dataclasses import dataclass
from typing import Optional, Self

from loguru import logger

from chesscore.chess.board import Board
from chesscore.chess.castling import CastlingRights, castling_from_fen, castling_to_fen
from chesscore.chess.game import Game
from chesscore.chess.pieces import FEN_TO_PIECE, Color
from chesscore.chess.square import BOARD_DIMENSIONS, RANK_NAMES, Square, parse_square
from chesscore.core.exceptions import FENErrorKind, InvalidFENError

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

CASTLING_PATTERN = re.compile(r"-|K?Q?k?q?")
EMPTY_SQUARE_DIGITS = RANK_NAMES
# en passant squares can only be on the 3rd or 6th rank (rank index 5 or 2)
EN_PASSANT_RANKS = (2, BOARD_DIMENSIONS[1] - 3)


# --- VALIDATION ---
def validate_fen(fen: str) -> None:
    """Raise InvalidFENError (with the kind of problem) if the string does not follow FEN notation."""

    # there should be 6 parts to the string
    parts = fen.split()
    if len(parts) != 6:
        raise InvalidFENError(FENErrorKind.FIELD_COUNT, fen)

    position, color, castling, en_passant, half_move_clock, full_move_number = parts
    validate_position(position, fen)

    if color not in {"w", "b"}:
        raise InvalidFENError(FENErrorKind.ACTIVE_COLOR, fen, color)

    if not is_valid_castling_rights(castling):
        raise InvalidFENError(FENErrorKind.CASTLING, fen, castling)

    if not is_valid_en_passant(en_passant):
        raise InvalidFENError(FENErrorKind.EN_PASSANT, fen, en_passant)

    if not is_valid_move_counter(half_move_clock, minimum=0):
        raise InvalidFENError(FENErrorKind.MOVE_COUNTER, fen, half_move_clock)
    if not is_valid_move_counter(full_move_number, minimum=1):
        raise InvalidFENError(FENErrorKind.MOVE_COUNTER, fen, full_move_number)


def is_valid_fen(fen: str) -> bool:
    try:
        validate_fen(fen)
    except InvalidFENError:
        return False
    return True


def validate_position(position: str, fen: str) -> None:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        raise InvalidFENError(FENErrorKind.RANK_COUNT, fen, position)

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character in EMPTY_SQUARE_DIGITS:
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                raise InvalidFENError(FENErrorKind.PIECE_SYMBOL, fen, character)

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            raise InvalidFENError(FENErrorKind.FILE_COUNT, fen, rank_fen)


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding has either KQkq, KQk, etc. (in that order) or a '-' if all rights have been revoked."""
    return bool(castling) and CASTLING_PATTERN.fullmatch(castling) is not None


def is_valid_en_passant(en_passant: str) -> bool:
    """Valid en passant square encoding should be a square on the 3rd or 6th rank or a '-'"""
    if en_passant == "-":
        return True
    square = parse_square(en_passant)
    return square is not None and square.rank in EN_PASSANT_RANKS


def is_valid_move_counter(counter: str, minimum: int) -> bool:
    return counter.isascii() and counter.isdigit() and int(counter) >= minimum


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    The purpose of FEN is to provide all the necessary information to restart a game from a particular position.
    """

    position: str
    color_to_move: Color
    castling_rights: CastlingRights
    en_passant_square: Optional[Square]
    half_move_clock: int
    full_move_number: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""

        # raise an exception if invalid FEN:
        try:
            validate_fen(fen)
        except InvalidFENError as error:
            logger.warning("FEN import failed: {}", error)
            raise

        # extract the different components. FEN is space separated
        (
            position,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            full_move_number,
        ) = fen.split()

        return cls(
            position=position,
            color_to_move=Color.WHITE if active_color == "w" else Color.BLACK,
            castling_rights=castling_from_fen(castling_str),
            en_passant_square=parse_square(en_passant_algebraic),
            half_move_clock=int(half_move_clock),
            full_move_number=int(full_move_number),
        )

    @classmethod
    def from_game(cls, game: Game) -> Self:
        return cls(
            position=game.board.to_fen(),
            color_to_move=game.current_player,
            castling_rights=dict(game.castling_rights),
            en_passant_square=game.en_passant_target,
            half_move_clock=game.halfmove_clock,
            full_move_number=game.fullmove_number,
        )

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        castling_str = castling_to_fen(self.castling_rights)
        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return f"{self.position} {active_color} {castling_str} {en_passant_algebraic} {self.half_move_clock} {self.full_move_number}"

    def to_game(self) -> Game:
        return Game(
            board=Board.from_fen(self.position),
            current_player=self.color_to_move,
            castling_rights=dict(self.castling_rights),
            en_passant_target=self.en_passant_square,
            halfmove_clock=self.half_move_clock,
            fullmove_number=self.full_move_number,
        )


def export_fen(game: Game) -> str:
    return FENState.from_game(game).to_fen()


def import_fen(fen: str) -> Game:
    return FENState.from_fen(fen).to_game()
