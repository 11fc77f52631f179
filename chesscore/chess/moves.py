"""
Geometry/Base movement and capturing rules

Key idea: one dispatch table (strategy pattern) maps every piece type to the function that
generates its pseudo-legal destinations.

Pseudo-legal means: consistent with the movement pattern and occupancy of the board, but
without checking whether the mover's own king is left in check. Legality is checked later by Game.
"""

from typing import Callable, Optional, Protocol

from chesscore.chess.pieces import Color, Piece, PieceType
from chesscore.chess.square import BOARD_DIMENSIONS, Square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...


# (delta rank, delta file)
Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


def pawn_direction(color: Color) -> int:
    """White moves UP the board (towards rank index 0), black moves DOWN"""
    return -1 if color == Color.WHITE else 1


def pawn_starting_rank(color: Color) -> int:
    return BOARD_DIMENSIONS[1] - 2 if color == Color.WHITE else 1


def promotion_rank(color: Color) -> int:
    return 0 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 1


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> set[Square]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.

    The first occupied square along a ray is included only if the opponent stands on it.
    """
    player_color = _color_on(square, board)

    moves: set[Square] = set()
    for dr, df in directions:
        target_square = square.offset(dr, df)
        while target_square.is_within_bounds():
            if not board.is_empty(target_square):
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if _color_on(target_square, board) != player_color:
                    moves.add(target_square)
                break

            moves.add(target_square)
            target_square = target_square.offset(dr, df)
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> set[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step along a direction"""
    player_color = _color_on(square, board)
    moves: set[Square] = set()
    for dr, df in deltas:
        target_square = square.offset(dr, df)
        if not target_square.is_within_bounds():
            continue

        target = board.piece(target_square)
        if target is None or target.color != player_color:
            moves.add(target_square)

    return moves


def candidate_pawn_moves(
    square: Square, board: Board, en_passant_target: Optional[Square] = None
) -> set[Square]:
    """
    A pawn:
    - moves by a single square forward, only onto an empty square.
    - It can move by two from its starting rank, if both squares in front are empty
    - takes diagonally (or on the en passant square, when one is passed in)
    """
    player_color = _color_on(square, board)
    direction = pawn_direction(player_color)
    moves: set[Square] = set()

    one_forward = square.offset(direction, 0)
    if one_forward.is_within_bounds() and board.is_empty(one_forward):
        moves.add(one_forward)

        two_forward = square.offset(2 * direction, 0)
        if square.rank == pawn_starting_rank(player_color) and board.is_empty(
            two_forward
        ):
            moves.add(two_forward)

    for df in (-1, 1):
        target_square = square.offset(direction, df)
        if not target_square.is_within_bounds():
            continue
        target = board.piece(target_square)
        is_opponent_piece = target is not None and target.color != player_color
        if is_opponent_piece or (
            target_square == en_passant_target
            and _can_take_en_passant(target_square, board, player_color)
        ):
            moves.add(target_square)
    return moves


def _can_take_en_passant(target_square: Square, board: Board, player_color: Color) -> bool:
    """The en passant square only counts if the enemy pawn that just passed it stands right behind it."""
    passed_pawn_square = target_square.offset(-pawn_direction(player_color), 0)
    return board.piece(passed_pawn_square) == Piece(PieceType.PAWN, player_color.opponent)


def candidate_knight_moves(square: Square, board: Board) -> set[Square]:
    """Knights always jump such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> set[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> set[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> set[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(square, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(square: Square, board: Board) -> set[Square]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a separate procedure of the Game.
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], set[Square]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def possible_moves(
    board: Board, square: Square, en_passant_target: Optional[Square] = None
) -> set[Square]:
    """
    Pseudo-legal destinations of the piece standing on `square`.

    Only pawns care about the en passant target, the other movement rules ignore it.
    An empty square has no moves.
    """
    piece = board.piece(square)
    if piece is None:
        return set()
    if piece.type == PieceType.PAWN:
        return candidate_pawn_moves(square, board, en_passant_target)
    return MOVEMENT_RULES[piece.type](square, board)


def _color_on(square: Square, board: Board) -> Optional[Color]:
    piece = board.piece(square)
    return piece.color if piece else None
