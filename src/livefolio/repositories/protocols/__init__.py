"""Repository protocols (interfaces)."""

from livefolio.repositories.protocols.cache_store import CacheStore

__all__ = [
    "CacheStore",
]
