"""Orchestration between the caller (CLI, bots, ...), the rules engine and the persistence layer."""

from uuid import UUID

from loguru import logger

from chesscore.chess.castling import CASTLING_RULES, CastlingDirection, CastlingSide
from chesscore.chess.fen import STARTING_FEN, export_fen, import_fen
from chesscore.chess.game import Game
from chesscore.chess.notation import CASTLING_NOTATION, Move
from chesscore.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    RepositoryError,
)
from chesscore.core.models import GameModel
from chesscore.core.shared_types import Status
from chesscore.db.repository import GameRepository
from chesscore.services.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GameSummary,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    ListGamesRequest,
    MoveRequest,
)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game, from the standard position unless a FEN is given."""
        starting_fen = request.starting_fen or STARTING_FEN
        game = import_fen(starting_fen)

        stored_game, game_id = self.repo.create_game(self._to_model(starting_fen, game))
        logger.info("Created game {} from {!r}", game_id, starting_fen)
        return self._create_game_response(game_id, stored_game, game)

    def get_game(self, request: GetGameRequest) -> GameResponse:
        """Retrieve current game state."""
        model = self._fetch_game(request.game_id)
        game = self._load_game(model)
        return self._create_game_response(request.game_id, model, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal moves of the player to move, optionally only those of the piece on the requested square."""
        model = self._fetch_game(request.game_id)
        game = self._load_game(model)

        legal_moves = game.legal_moves()
        if request.square is not None:
            castling_moves = set(CASTLING_NOTATION.values())
            # castling is listed as O-O / O-O-O, it belongs to the king's home square
            king_home = CASTLING_RULES[
                CastlingDirection.of(game.current_player, CastlingSide.KINGSIDE)
            ].king_from.to_algebraic()
            legal_moves = [
                move
                for move in legal_moves
                if move.startswith(request.square)
                or (move in castling_moves and request.square == king_home)
            ]
        return LegalMovesResponse(
            game_id=request.game_id,
            color=game.current_player,
            legal_moves=legal_moves,
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt.
        -----

        The rules engine answers with True/False. Here a rejected move becomes an IllegalMoveError,
        so the caller is forced to deal with it.
        """
        model = self._fetch_game(request.game_id)
        game = self._load_game(model)

        if game.is_over():
            raise GameStateError(f"Game is over: {game.result}")

        if not game.apply_move(request.notation):
            raise IllegalMoveError(f"Move not allowed: {request.notation!r}")

        after_move = self._to_model(model.starting_fen, game)
        self.repo.update_game(request.game_id, after_move)
        logger.info(
            "Game {}: {} played {}",
            request.game_id,
            game.current_player.opponent,
            game.moves[-1].to_algebraic(),
        )
        return self._create_game_response(request.game_id, after_move, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        logger.info("Deleted game {}", request.game_id)

    def list_games(self, request: ListGamesRequest) -> list[GameSummary]:
        """Stored games, oldest first. Summaries come straight from the records: nothing gets replayed."""
        status = request.status.value if request.status is not None else None
        return [
            GameSummary(
                game_id=game_id,
                fen_state=model.current_fen,
                plies=len(model.moves),
                status=Status(model.status),
                result=model.result,
            )
            for game_id, model in self.repo.list_games(status)
        ]

    # -- Internal helpers --
    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model

    def _load_game(self, model: GameModel) -> Game:
        """Replaying the moves (instead of importing the current FEN) restores the repetition history as well."""
        try:
            return Game.replay(model.moves, start=import_fen(model.starting_fen))
        except IllegalMoveError as error:
            raise RepositoryError(f"Stored game is corrupt: {error}") from error

    def _to_model(self, starting_fen: str, game: Game) -> GameModel:
        return GameModel(
            starting_fen=starting_fen,
            current_fen=export_fen(game),
            moves=[self._record(move) for move in game.moves],
            status=game.status.value,
            result=game.result,
        )

    @staticmethod
    def _record(move: Move) -> str:
        """Castling is stored as O-O / O-O-O: apply_move reads e1g1 as a plain king move."""
        return move.to_algebraic() if move.castling else move.to_long_algebraic()

    def _create_game_response(
        self, game_id: UUID, model: GameModel, game: Game
    ) -> GameResponse:
        return GameResponse(
            game_id=game_id,
            fen_state=model.current_fen,
            starting_state=model.starting_fen,
            move_history=model.moves,
            color_to_move=game.current_player,
            in_check=game.in_check(game.current_player),
            status=game.status,
            result=game.result,
            last_move=game.moves[-1].to_algebraic() if game.moves else None,
        )
