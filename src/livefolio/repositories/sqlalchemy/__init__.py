"""SQLAlchemy repository implementations."""

from livefolio.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    init_db,
    reset_database,
    Base,
)
from livefolio.repositories.sqlalchemy.cache_store import SqlAlchemyCacheStore

__all__ = [
    "get_engine",
    "get_session_factory",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyCacheStore",
]
