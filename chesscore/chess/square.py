"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Internally ranks are counted from Black's back rank: rank 0 is the 8th rank in algebraic
notation and rank 7 is the 1st rank. Files run a-h as 0-7.
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase
from typing import Optional

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]
RANK_NAMES = "".join(str(rank) for rank in range(1, BOARD_DIMENSIONS[1] + 1))


@dataclass(frozen=True, order=True)
class Square:
    rank: int
    file: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)

        The file letter is lower-cased first, so 'E4' and 'e4' are the same square.
        """
        file = ord(sq[0].lower()) - ord("a")
        rank = BOARD_DIMENSIONS[1] - int(sq[1])
        return cls(rank, file)

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.file]}{BOARD_DIMENSIONS[1] - self.rank}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.rank < BOARD_DIMENSIONS[1]) and (
            0 <= self.file < BOARD_DIMENSIONS[0]
        )

    def offset(self, d_rank: int, d_file: int) -> Square:
        return Square(self.rank + d_rank, self.file + d_file)

    def is_light(self) -> bool:
        """Checkerboard parity: a8 (0, 0) is a light square."""
        return (self.rank + self.file) % 2 == 0


def parse_square(token: str) -> Optional[Square]:
    """Lenient parsing: returns None instead of failing when the token is not a square."""
    if len(token) != 2:
        return None
    file_char, rank_char = token[0].lower(), token[1]
    if file_char not in FILE_NAMES or rank_char not in RANK_NAMES:
        return None
    return Square.from_algebraic(file_char + rank_char)
