"""
Database tables / schema

A game is one row in `games`, every ply it consists of is one row in `plies`.
The position can always be rebuilt by replaying the plies (in order of `number`) from `starting_fen`;
`current_fen` is stored next to it for lookups without a replay.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from chesscore.core.shared_types import Status


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    starting_fen: Mapped[str]
    current_fen: Mapped[str]
    status: Mapped[str] = mapped_column(default=Status.IN_PROGRESS.value, index=True)
    result: Mapped[Optional[str]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)

    plies: Mapped[list["DBPly"]] = relationship(
        back_populates="game",
        order_by="DBPly.number",
        cascade="all, delete-orphan",
    )


class DBPly(Base):
    __tablename__ = "plies"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    game_id: Mapped[UUID] = mapped_column(ForeignKey("games.id"), index=True)
    number: Mapped[int]  # 1 for White's first move
    notation: Mapped[str]

    game: Mapped[DBGame] = relationship(back_populates="plies")
