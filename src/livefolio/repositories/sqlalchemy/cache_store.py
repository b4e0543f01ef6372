"""SQLAlchemy implementation of CacheStore."""

import json
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from livefolio.core.exceptions import CacheUnavailableError
from livefolio.core.timezone import to_utc
from livefolio.domain.models import CacheEntry
from livefolio.repositories.sqlalchemy.orm_models import CacheEntryORM


class SqlAlchemyCacheStore:
    """
    SQLAlchemy-backed cache store.

    Payloads are stored as JSON text; one short-lived session per call.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Get the entry stored under key."""
        try:
            with self._session_factory() as db:
                orm_entry = db.get(CacheEntryORM, key)
                return self._to_domain(orm_entry) if orm_entry else None
        except (SQLAlchemyError, ValueError) as e:
            raise CacheUnavailableError("read", str(e))

    def put_entry(self, entry: CacheEntry) -> None:
        """Insert or overwrite a cache entry."""
        try:
            payload_json = json.dumps(entry.payload)
        except (TypeError, ValueError) as e:
            raise CacheUnavailableError("write", f"payload not serializable: {e}")

        try:
            with self._session_factory() as db:
                orm_entry = db.get(CacheEntryORM, entry.key)
                if orm_entry:
                    orm_entry.stored_at = to_utc(entry.stored_at)
                    orm_entry.payload_json = payload_json
                else:
                    db.add(
                        CacheEntryORM(
                            key=entry.key,
                            stored_at=to_utc(entry.stored_at),
                            payload_json=payload_json,
                        )
                    )
                db.commit()
        except SQLAlchemyError as e:
            raise CacheUnavailableError("write", str(e))

    @staticmethod
    def _to_domain(orm: CacheEntryORM) -> CacheEntry:
        """Convert ORM entry to domain model. SQLite returns naive UTC datetimes."""
        return CacheEntry(
            key=orm.key,
            stored_at=to_utc(orm.stored_at),
            payload=json.loads(orm.payload_json),
        )
