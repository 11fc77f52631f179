"""
The Game class is the entrypoint into the rules engine.

It is responsible for orchestrating all the business logic required to play a ply:
parse the notation, find the piece that is meant, make sure the move is legal, update the board and
the bookkeeping (castling rights, en passant square, clocks, history), and finally detect whether the game ended.

Ordinary gameplay input never raises. A rejected move returns False and leaves the Game untouched.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Self

from loguru import logger

from chesscore.chess.board import Board
from chesscore.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingRights,
    CastlingSide,
    all_castling_rights,
    castling_to_fen,
)
from chesscore.chess.moves import pawn_direction, possible_moves, promotion_rank
from chesscore.chess.notation import (
    CASTLING_NOTATION,
    Move,
    MoveIntent,
    parse_notation,
)
from chesscore.chess.pieces import PROMOTION_OPTIONS, PIECE_TO_FEN, Color, Piece, PieceType
from chesscore.chess.square import Square
from chesscore.core.exceptions import IllegalMoveError
from chesscore.core.shared_types import Status

FIFTY_MOVE_RULE_PLIES = 100
REPETITIONS_FOR_DRAW = 3
MINOR_PIECES = (PieceType.BISHOP, PieceType.KNIGHT)


@dataclass
class Game:
    board: Board = field(default_factory=Board.standard)
    current_player: Color = Color.WHITE
    moves: list[Move] = field(default_factory=list)
    castling_rights: CastlingRights = field(default_factory=all_castling_rights)
    en_passant_target: Optional[Square] = None
    halfmove_clock: int = 0
    fullmove_number: int = 1
    positions: list[str] = field(default_factory=list)  # one position signature per completed ply
    status: Status = field(default=Status.IN_PROGRESS, init=False)

    def __post_init__(self) -> None:
        self._update_status()

    @classmethod
    def replay(cls, moves: Iterable[str], start: Optional[Self] = None) -> Self:
        """
        Rebuild a game by playing the recorded moves (any notation apply_move accepts).

        Used when loading saved games, so a rejected move means the record is corrupt and we raise.
        """
        game = start if start is not None else cls()
        for notation in moves:
            if not game.apply_move(notation):
                raise IllegalMoveError(
                    f"Cannot replay {notation!r} after {len(game.moves)} plies."
                )
        return game

    # --- STATE ---
    def is_over(self) -> bool:
        return self.status != Status.IN_PROGRESS

    @property
    def winner(self) -> Optional[Color]:
        """Only a checkmate has a winner: the player who just got mated is the one to move."""
        if self.status != Status.CHECKMATE:
            return None
        return self.current_player.opponent

    @property
    def result(self) -> Optional[str]:
        """Human readable description of the terminal state"""
        if self.status == Status.IN_PROGRESS:
            return None
        if self.status == Status.CHECKMATE:
            return f"{self.winner} wins by checkmate"
        if self.status == Status.STALEMATE:
            return "Draw by stalemate"
        return self.status.value.capitalize()

    def material(self) -> dict[Color, int]:
        return self.board.count_material()

    def set_state(
        self,
        current_player: Color,
        castling_rights: CastlingRights,
        en_passant_target: Optional[Square],
        halfmove_clock: int,
        fullmove_number: int,
    ) -> None:
        """The fields a position description (FEN) carries next to the board itself."""
        self.current_player = current_player
        self.castling_rights = dict(castling_rights)
        self.en_passant_target = en_passant_target
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._update_status()

    # --- MAKING MOVES ---
    def apply_move(self, notation: str) -> bool:
        """
        Attempt a move given in long algebraic, standard algebraic or castling notation.
        -----

        1. parse the notation into an intent (castling is handed to `castle`)
        2. find the origin square if the notation does not contain it
        3. check the piece belongs to the player to move, and the destination is a legal one
        4. update the board (en passant capture, promotion)
        5. update the move history, castling rights, en passant square, clocks and repetition history
        6. switch players and update the game status

        Every check happens before the first mutation, so a rejected move leaves no trace.
        """
        if self.is_over():
            return self._reject(notation, f"game is over ({self.status})")

        intent = parse_notation(notation)
        if intent.is_empty():
            return self._reject(notation, "could not parse notation")

        if intent.castling is not None:
            return self.castle(intent.castling)

        to_square = intent.to_square
        if to_square is None:
            return self._reject(notation, "no destination square")

        from_square = intent.from_square or self._resolve_source_square(intent)
        if from_square is None:
            return self._reject(notation, "no unique piece can make this move")

        piece = self.board.piece(from_square)
        if piece is None or piece.color != self.current_player:
            return self._reject(notation, f"no {self.current_player} piece on origin")

        if to_square not in self.legal_moves_for(from_square):
            return self._reject(notation, "illegal destination")

        reaches_last_rank = piece.type == PieceType.PAWN and (
            to_square.rank == promotion_rank(piece.color)
        )
        if intent.promotion is not None and not reaches_last_rank:
            return self._reject(notation, "promotion only happens on the last rank")
        promotion = (intent.promotion or PieceType.QUEEN) if reaches_last_rank else None

        self._play(from_square, to_square, piece, promotion)
        return True

    def castle(self, side: CastlingSide) -> bool:
        """
        Castling moves both the king and the rook in a single ply.
        ---

        **you are allowed to castle if**

        * Castling rights are not yet revoked and the king and rook still stand on their home squares.
        * All squares in between them are empty.
        * You are not currently in check (you cannot castle out of check).
        * None of the squares the king travels over is attacked.
        """
        notation = CASTLING_NOTATION[side]
        if self.is_over():
            return self._reject(notation, f"game is over ({self.status})")

        direction = CastlingDirection.of(self.current_player, side)
        if not self._can_castle(direction):
            return self._reject(notation, "castling not allowed")

        rule = CASTLING_RULES[direction]
        king = Piece(PieceType.KING, self.current_player)
        self.board.relocate(rule.king_from, rule.king_to)
        self.board.relocate(rule.rook_from, rule.rook_to)

        move = Move(rule.king_from, rule.king_to, king, castling=side)
        self.moves.append(move)
        self._revoke_castling_rights(move)
        self.en_passant_target = None
        self.halfmove_clock += 1
        self._finish_ply()
        return True

    # --- LEGAL MOVES ---
    def legal_moves_for(self, square: Square) -> set[Square]:
        """
        Check-safe destinations of the piece standing on the square.

        Pseudo-legal moves are tried out on a copy of the board and dropped if they leave your own king attacked.
        The en passant square only ever belongs to the player to move.
        """
        piece = self.board.piece(square)
        if piece is None:
            return set()

        en_passant_target = (
            self.en_passant_target if piece.color == self.current_player else None
        )
        candidates = possible_moves(self.board, square, en_passant_target)
        return {
            to_square
            for to_square in candidates
            if not self._is_putting_yourself_in_check(
                square, to_square, piece, en_passant_target
            )
        }

    def legal_moves(self) -> list[str]:
        """
        Every legal move of the player to move, in notation apply_move accepts.

        Pawn pushes to the last rank are expanded: one move for every piece type you can promote into.
        """
        if self.is_over():
            return []

        legal: list[str] = []
        for square, piece in self.board.pieces_of(self.current_player):
            for to_square in sorted(self.legal_moves_for(square)):
                uci = f"{square.to_algebraic()}{to_square.to_algebraic()}"
                if piece.type == PieceType.PAWN and to_square.rank == promotion_rank(
                    piece.color
                ):
                    legal.extend(uci + PIECE_TO_FEN[kind] for kind in PROMOTION_OPTIONS)
                else:
                    legal.append(uci)

        for side in CastlingSide:
            if self._can_castle(CastlingDirection.of(self.current_player, side)):
                legal.append(CASTLING_NOTATION[side])
        return legal

    def in_check(self, color: Color) -> bool:
        return self._is_king_attacked(self.board, color)

    def is_checkmate(self, color: Color) -> bool:
        return self.in_check(color) and not self._has_legal_move(color)

    def is_stalemate(self, color: Color) -> bool:
        return not self.in_check(color) and not self._has_legal_move(color)

    # --- DRAWS ---
    def is_fifty_move_draw(self) -> bool:
        """50 moves by each side (so 100 plies) without a pawn move or a capture"""
        return self.halfmove_clock >= FIFTY_MOVE_RULE_PLIES

    def is_threefold_repetition(self) -> bool:
        """The current position occurs (at least) 3 times in the history"""
        return self.positions.count(self._position_signature()) >= REPETITIONS_FOR_DRAW

    def is_insufficient_material(self) -> bool:
        """
        Nobody can deliver mate with:
        * king vs king
        * king + a single minor piece vs king
        * king + bishop vs king + bishop, with both bishops on the same square color
        """
        non_kings = [
            (square, piece)
            for color in Color
            for square, piece in self.board.pieces_of(color)
            if piece.type != PieceType.KING
        ]
        if any(piece.type not in MINOR_PIECES for _, piece in non_kings):
            return False
        if len(non_kings) <= 1:
            return True
        if len(non_kings) == 2:
            (first_square, first), (second_square, second) = non_kings
            return (
                first.type == second.type == PieceType.BISHOP
                and first.color != second.color
                and first_square.is_light() == second_square.is_light()
            )
        return False

    # -- PRIVATE HELPERS ---
    def _reject(self, notation: str, reason: str) -> bool:
        logger.debug("Rejected move {!r}: {}", notation, reason)
        return False

    def _resolve_source_square(self, intent: MoveIntent) -> Optional[Square]:
        """
        Which of your pieces is meant by e.g. `Nf3`?
        ----

        Collect the pieces of the requested type that can legally reach the destination.
        If more than one qualifies, the file/rank disambiguators have to narrow it down to exactly one.
        Ambiguous notation is rejected: never pick one of the candidates at random.
        """
        wanted = Piece(intent.piece_type or PieceType.PAWN, self.current_player)
        candidates = [
            square
            for square in self.board.locate_pieces(wanted)
            if intent.to_square in self.legal_moves_for(square)
        ]
        if len(candidates) <= 1:
            return candidates[0] if candidates else None

        matching = [
            square
            for square in candidates
            if (intent.from_file is None or square.file == intent.from_file)
            and (intent.from_rank is None or square.rank == intent.from_rank)
        ]
        return matching[0] if len(matching) == 1 else None

    def _play(
        self,
        from_square: Square,
        to_square: Square,
        piece: Piece,
        promotion: Optional[PieceType],
    ) -> None:
        """Update the board and all bookkeeping for an already validated move."""
        is_en_passant = (
            piece.type == PieceType.PAWN and to_square == self.en_passant_target
        )
        captured = self.board.relocate(from_square, to_square)

        if is_en_passant:
            # the pawn taken en passant is not standing on the destination but right behind it
            captured = self.board.remove_piece(
                to_square.offset(-pawn_direction(piece.color), 0)
            )

        if promotion is not None:
            self.board.place_piece(piece.promoted_to(promotion), to_square)

        move = Move(
            from_square,
            to_square,
            piece,
            captured=captured,
            promotion=promotion,
            is_en_passant=is_en_passant,
        )
        self.moves.append(move)
        self._revoke_castling_rights(move)
        self._update_en_passant_target(move)
        self._update_halfmove_clock(move)
        self._finish_ply()

    def _finish_ply(self) -> None:
        """Hand the turn to the opponent, record the position and check whether the game ended."""
        if self.current_player == Color.BLACK:
            self.fullmove_number += 1
        self.current_player = self.current_player.opponent
        self.positions.append(self._position_signature())
        self._update_status()

    def _update_status(self) -> None:
        """Termination checks in priority order, always for the player that is about to move."""
        color = self.current_player
        if self.is_checkmate(color):
            self.status = Status.CHECKMATE
        elif self.is_stalemate(color):
            self.status = Status.STALEMATE
        elif self.is_fifty_move_draw():
            self.status = Status.DRAW_FIFTY_MOVE_RULE
        elif self.is_threefold_repetition():
            self.status = Status.DRAW_REPETITION
        elif self.is_insufficient_material():
            self.status = Status.DRAW_INSUFFICIENT_MATERIAL
        else:
            self.status = Status.IN_PROGRESS

        if self.is_over():
            logger.info("Game over after {} plies: {}", len(self.moves), self.result)

    def _position_signature(self) -> str:
        """
        Everything that makes two positions the same for the repetition rule:
        piece placement, castling rights and en passant target. Side to move and move counters are not part of it.
        """
        en_passant = (
            self.en_passant_target.to_algebraic() if self.en_passant_target else "-"
        )
        return " ".join(
            [
                self.board.to_fen(),
                castling_to_fen(self.castling_rights),
                en_passant,
            ]
        )

    # -- LEGAL MOVES HELPERS ---
    def _is_putting_yourself_in_check(
        self,
        from_square: Square,
        to_square: Square,
        piece: Piece,
        en_passant_target: Optional[Square],
    ) -> bool:
        """Return True if the move leaves your own king attacked

        plan:
        1. Copy the board
        2. make the candidate move (remove the pawn taken en passant, too)
        3. determine if king is attacked on the new board
        """
        board = self.board.copy()
        board.relocate(from_square, to_square)
        if piece.type == PieceType.PAWN and to_square == en_passant_target:
            board.remove_piece(to_square.offset(-pawn_direction(piece.color), 0))
        return self._is_king_attacked(board, piece.color)

    @staticmethod
    def _is_king_attacked(board: Board, color: Color) -> bool:
        """Pseudo-legal moves suffice to tell if the opponent attacks the king."""
        king_square = board.find_king(color)
        if king_square is None:
            return False
        return any(
            king_square in possible_moves(board, square)
            for square, _ in board.pieces_of(color.opponent)
        )

    def _has_legal_move(self, color: Color) -> bool:
        return any(
            self.legal_moves_for(square) for square, _ in self.board.pieces_of(color)
        )

    # -- CASTLING RULE HELPERS ---
    def _can_castle(self, direction: CastlingDirection) -> bool:
        if not self.castling_rights[direction]:
            return False

        color = direction.color
        rule = CASTLING_RULES[direction]
        if self.board.piece(rule.king_from) != Piece(PieceType.KING, color):
            return False
        if self.board.piece(rule.rook_from) != Piece(PieceType.ROOK, color):
            return False

        # Cannot castle if any of the squares in between is occupied
        if any(not self.board.is_empty(square) for square in rule.between):
            return False

        # Cannot castle out of a check.
        if self.in_check(color):
            return False

        # Cannot castle through or into check: walk the king along its path on a scratch board
        for square in rule.king_path:
            board = self.board.copy()
            board.relocate(rule.king_from, square)
            if self._is_king_attacked(board, color):
                return False
        return True

    def _revoke_castling_rights(self, move: Move) -> None:
        """
        Checks which rights should get revoked
        ----

        1. If you are moving your king (castling included) --> revoke both
        2. If you are moving a rook away from its home square --> revoke the right of that side
        3. If you capture a rook standing on its home square --> your opponent loses the right of that side
        """
        for direction, rule in CASTLING_RULES.items():
            if direction.color == move.piece.color:
                if move.piece.type == PieceType.KING or (
                    move.piece.type == PieceType.ROOK
                    and move.from_square == rule.rook_from
                ):
                    self.castling_rights[direction] = False
            elif (
                move.captured == Piece(PieceType.ROOK, direction.color)
                and move.to_square == rule.rook_from
            ):
                self.castling_rights[direction] = False

    # --- EN PASSANT / HALF MOVE CLOCK HELPERS ---
    def _update_en_passant_target(self, move: Move) -> None:
        """Only a pawn that just advanced two squares can be taken en passant, and only on the next ply."""
        self.en_passant_target = None
        ranks_moved = abs(move.from_square.rank - move.to_square.rank)
        if move.piece.type == PieceType.PAWN and ranks_moved == 2:
            self.en_passant_target = move.from_square.offset(
                pawn_direction(move.piece.color), 0
            )

    def _update_halfmove_clock(self, move: Move) -> None:
        if move.piece.type == PieceType.PAWN or move.is_capture:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
