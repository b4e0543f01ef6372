"""SQLAlchemy ORM model definitions."""

from sqlalchemy import Column, String, DateTime, Text

from livefolio.repositories.sqlalchemy.database import Base


class CacheEntryORM(Base):
    """SQLAlchemy model for a TTL cache entry."""

    __tablename__ = "cache_entries"

    key = Column(String(512), primary_key=True)
    stored_at = Column(DateTime(timezone=True), nullable=False)
    payload_json = Column(Text, nullable=False)
