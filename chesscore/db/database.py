"""Generate database session"""

from functools import lru_cache
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chesscore.core.config import Settings, get_settings
from chesscore.db.schema import Base


def create_db_engine(settings: Settings) -> Engine:
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return engine


@lru_cache
def session_factory() -> sessionmaker[Session]:
    return sessionmaker(bind=create_db_engine(get_settings()))


def get_db() -> Generator[Session, None, None]:
    db = session_factory()()
    try:
        yield db
    finally:
        db.close()
