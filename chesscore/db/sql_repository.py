"""Implementation of (Game)Repository using SQLAlchemy"""

from typing import Optional
from uuid import UUID, uuid4

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from chesscore.core.models import GameModel
from chesscore.db.schema import DBGame, DBPly


class SQLGameRepository:
    """Games and their plies stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        new_id = uuid4()
        game_db = DBGame(id=new_id, plies=[])
        self._write(game_db, game)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        logger.debug("Stored new game {}", new_id)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._write(game_db, game)
        self.db.commit()
        self.db.refresh(game_db)
        logger.debug("Updated game {} ({} plies)", game_id, len(game.moves))
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        logger.debug("Deleted game {}", game_id)
        return game_model

    def list_games(self, status: Optional[str] = None) -> list[tuple[UUID, GameModel]]:
        query = select(DBGame).order_by(DBGame.created_at)
        if status is not None:
            query = query.where(DBGame.status == status)
        return [(game_db.id, self._to_model(game_db)) for game_db in self.db.scalars(query)]

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _write(self, game_db: DBGame, game: GameModel) -> None:
        """Copy the record into the row. Plies already stored are kept as long as the move list still starts with them."""
        game_db.starting_fen = game.starting_fen
        game_db.current_fen = game.current_fen
        game_db.status = game.status
        game_db.result = game.result

        kept = 0
        for ply, notation in zip(game_db.plies, game.moves):
            if ply.notation != notation:
                break
            kept += 1
        del game_db.plies[kept:]
        game_db.plies.extend(
            DBPly(number=number, notation=notation)
            for number, notation in enumerate(game.moves[kept:], start=kept + 1)
        )

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            starting_fen=game_db.starting_fen,
            current_fen=game_db.current_fen,
            moves=[ply.notation for ply in game_db.plies],
            status=game_db.status,
            result=game_db.result,
        )
