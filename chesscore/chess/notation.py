"""
Move notation
-----

Two directions:

* Serialization: a `Move` (the record of a ply that has been played) to long algebraic (`e2e4`, `e7e8q`)
  or short/standard algebraic (`Nf3`, `exd5`, `O-O`).
* Parsing: free-form text into a `MoveIntent`. An intent is not a validated move: when the origin square
  is missing, the Game figures out which piece is meant.

Parsing is case-insensitive throughout. Text gets re-cased by whatever layer sits in between the player
and the engine, so the token is folded to lower case before any square or piece letter is looked at.
"""

import re
from dataclasses import dataclass
from typing import Optional, Self

from chesscore.chess.castling import CastlingSide
from chesscore.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Piece, PieceType
from chesscore.chess.square import (
    BOARD_DIMENSIONS,
    FILE_NAMES,
    RANK_NAMES,
    Square,
    parse_square,
)

CASTLING_NOTATION: dict[CastlingSide, str] = {
    CastlingSide.KINGSIDE: "O-O",
    CastlingSide.QUEENSIDE: "O-O-O",
}

KINGSIDE_PATTERN = re.compile(r"[o0]-[o0]")
QUEENSIDE_PATTERN = re.compile(r"[o0]-[o0]-[o0]")
LONG_ALGEBRAIC_PATTERN = re.compile(r"([a-h][1-8])([a-h][1-8])([qrbn])?")
EXPLICIT_PROMOTION_PATTERN = re.compile(r"=([qrbn])$")
BARE_PROMOTION_PATTERN = re.compile(r"(?<=[1-8])([qrbn])$")

ANNOTATION_CHARACTERS = "+#!?"
PIECE_LETTERS = "kqrbn"


def piece_letter(piece_type: PieceType) -> str:
    """Upper case letter used in standard notation. Pawns have none."""
    if piece_type == PieceType.PAWN:
        return ""
    return PIECE_TO_FEN[piece_type].upper()


@dataclass(frozen=True)
class Move:
    """Historical record of a single ply. Created by the Game once the ply has been applied."""

    from_square: Square
    to_square: Square
    piece: Piece
    captured: Optional[Piece] = None
    castling: Optional[CastlingSide] = None
    promotion: Optional[PieceType] = None
    is_en_passant: bool = False

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def to_long_algebraic(self) -> str:
        """<from-square><to-square>[promotion letter], e.g. e2e4 or e7e8q"""
        promotion = PIECE_TO_FEN[self.promotion] if self.promotion else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{promotion}"

    def to_algebraic(self) -> str:
        """Short notation: O-O / O-O-O or [piece][pawn file on capture][x]<to-square>[promotion]"""
        if self.castling is not None:
            return CASTLING_NOTATION[self.castling]

        notation = piece_letter(self.piece.type)
        if self.piece.type == PieceType.PAWN and self.is_capture:
            notation += FILE_NAMES[self.from_square.file]
        if self.is_capture:
            notation += "x"
        notation += self.to_square.to_algebraic()
        if self.promotion:
            notation += piece_letter(self.promotion)
        return notation


@dataclass(frozen=True)
class MoveIntent:
    """
    What a notation token asks for. Empty (all fields None) means the token could not be parsed.

    Disambiguators are internal indices: `from_file` 0-7 for a-h, `from_rank` 0-7 with 0 being the 8th rank.
    A missing `piece_type` means a pawn.
    """

    to_square: Optional[Square] = None
    from_square: Optional[Square] = None
    piece_type: Optional[PieceType] = None
    from_file: Optional[int] = None
    from_rank: Optional[int] = None
    promotion: Optional[PieceType] = None
    castling: Optional[CastlingSide] = None

    @classmethod
    def empty(cls) -> Self:
        return cls()

    def is_empty(self) -> bool:
        return self == MoveIntent()


def parse_notation(notation: Optional[str]) -> MoveIntent:
    """
    Classify a notation token as castling, long algebraic or standard algebraic.

    Never raises: anything that cannot be understood results in an empty intent.
    """
    if notation is None:
        return MoveIntent.empty()

    # fold case before anything else, then drop check/mate/annotation suffixes
    token = notation.strip().lower().rstrip(ANNOTATION_CHARACTERS)
    if len(token) < 2:
        return MoveIntent.empty()

    if QUEENSIDE_PATTERN.fullmatch(token):
        return MoveIntent(castling=CastlingSide.QUEENSIDE)
    if KINGSIDE_PATTERN.fullmatch(token):
        return MoveIntent(castling=CastlingSide.KINGSIDE)

    long_match = LONG_ALGEBRAIC_PATTERN.fullmatch(token)
    if long_match:
        from_token, to_token, promotion_letter = long_match.groups()
        return MoveIntent(
            from_square=Square.from_algebraic(from_token),
            to_square=Square.from_algebraic(to_token),
            promotion=FEN_TO_PIECE[promotion_letter] if promotion_letter else None,
        )

    return _parse_standard_algebraic(token)


def _parse_standard_algebraic(token: str) -> MoveIntent:
    """
    [piece letter][disambiguation][x]<to-square>[=promotion | promotion]

    Order matters:
    1. Capture marker (and dashes) go first, so 'x' is never read as a file disambiguator.
    2. The promotion suffix goes next, so the destination really is the last two characters.
    """
    clean = token.replace("x", "").replace("-", "")

    promotion: Optional[PieceType] = None
    promotion_match = EXPLICIT_PROMOTION_PATTERN.search(
        clean
    ) or BARE_PROMOTION_PATTERN.search(clean)
    if promotion_match:
        promotion = FEN_TO_PIECE[promotion_match.group(1)]
        clean = clean[: promotion_match.start()]

    if len(clean) < 2:
        return MoveIntent.empty()
    to_square = parse_square(clean[-2:])
    if to_square is None:
        return MoveIntent.empty()

    head = clean[:-2]
    piece_type: Optional[PieceType] = None
    if head and head[0] in PIECE_LETTERS:
        piece_type = FEN_TO_PIECE[head[0]]
        head = head[1:]

    disambiguation = _parse_disambiguation(head)
    if disambiguation is None:
        return MoveIntent.empty()
    from_file, from_rank = disambiguation

    return MoveIntent(
        to_square=to_square,
        piece_type=piece_type,
        from_file=from_file,
        from_rank=from_rank,
        promotion=promotion,
    )


def _parse_disambiguation(interior: str) -> Optional[tuple[Optional[int], Optional[int]]]:
    """Optional file letter and/or rank digit between the piece letter and the destination square."""
    if len(interior) > 2:
        return None

    from_file: Optional[int] = None
    from_rank: Optional[int] = None
    for character in interior:
        if character in FILE_NAMES and from_file is None:
            from_file = FILE_NAMES.index(character)
        elif character in RANK_NAMES and from_rank is None:
            from_rank = BOARD_DIMENSIONS[1] - int(character)
        else:
            return None
    return from_file, from_rank
