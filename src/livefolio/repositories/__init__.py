"""Repository layer - data access abstractions and implementations."""

from livefolio.repositories.protocols import CacheStore

__all__ = [
    "CacheStore",
]
