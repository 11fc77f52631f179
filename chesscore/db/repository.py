"""What the service needs from persistence. SQLAlchemy implementation: sql_repository.py"""

from typing import Optional, Protocol
from uuid import UUID

from chesscore.core.models import GameModel


class GameRepository(Protocol):
    """Store of game records, addressed by the UUID handed out on creation"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """The stored record, None for an unknown id."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a new record. Returns what was stored and its id."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite the record (moves included), None for an unknown id."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove the record and hand back what it held, None for an unknown id."""
        ...

    def list_games(self, status: Optional[str] = None) -> list[tuple[UUID, GameModel]]:
        """All records (oldest first), optionally only those with the given status."""
        ...
