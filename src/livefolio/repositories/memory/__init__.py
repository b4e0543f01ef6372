"""In-memory repository implementations."""

from livefolio.repositories.memory.cache_store import InMemoryCacheStore

__all__ = [
    "InMemoryCacheStore",
]
