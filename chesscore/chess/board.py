"""The Game board stores the `position` (in chess: the configuration of pieces on the board).

Pure data-structure operations, no legality logic.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from chesscore.chess.pieces import Color, Piece, PieceType
from chesscore.chess.square import BOARD_DIMENSIONS, Square

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass
class Board:
    # only occupied squares are stored: a missing key is an empty square
    position: dict[Square, Piece] = field(default_factory=dict)

    @classmethod
    def standard(cls) -> Self:
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (rank index 0), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.

        NOTE: no validation here, see chesscore.chess.fen for that.
        """
        position: dict[Square, Piece] = {}
        for rank, fen_one_rank in enumerate(fen_str.split("/")):
            file = 0
            for character in fen_one_rank:
                if character.isalpha():
                    # simple case: a letter directly denotes the piece that should be created
                    position[Square(rank, file)] = Piece.from_fen(character)
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
        return cls(position)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1])
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = self.piece(Square(rank, file))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def in_bounds(self, square: Square) -> bool:
        return square.is_within_bounds()

    def piece(self, square: Square) -> Optional[Piece]:
        """Out of bounds squares simply hold no piece"""
        return self.position.get(square)

    def is_empty(self, square: Square) -> bool:
        return self.piece(square) is None

    def place_piece(self, piece: Optional[Piece], square: Square) -> None:
        """Place a piece on the square. Placing `None` clears the square."""
        if piece is None:
            self.position.pop(square, None)
        else:
            self.position[square] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        return self.position.pop(square, None)

    def relocate(self, from_square: Square, to_square: Square) -> Optional[Piece]:
        """
        Move whatever stands on `from_square` to `to_square` and return what was standing there before.

        This is a primitive: no check whether the move is legal, or whether there even was a piece to move.
        """
        moving_piece = self.remove_piece(from_square)
        captured = self.remove_piece(to_square)
        self.place_piece(moving_piece, to_square)
        return captured

    def pieces_of(self, color: Color) -> list[tuple[Square, Piece]]:
        return [
            (square, piece)
            for square, piece in sorted(self.position.items())
            if piece.color == color
        ]

    def locate_pieces(self, piece: Piece) -> list[Square]:
        return [square for square, found in self.pieces_of(piece.color) if found == piece]

    def find_king(self, color: Color) -> Optional[Square]:
        kings = self.locate_pieces(Piece(PieceType.KING, color))
        return kings[0] if kings else None

    def copy(self) -> Self:
        """Independent copy of the grid. Pieces are immutable values, so they can be shared."""
        return type(self)(dict(self.position))

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {color: self._count_material_player(color) for color in Color}

    def _count_material_player(self, color: Color) -> int:
        """Tally the points of material for a specific player"""
        return sum(piece.points for _, piece in self.pieces_of(color))
