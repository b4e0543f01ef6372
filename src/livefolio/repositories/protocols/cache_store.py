"""Cache store protocol for the TTL cache backing storage."""

from typing import Protocol, Optional

from livefolio.domain.models import CacheEntry


class CacheStore(Protocol):
    """
    Key-value persistence for cache entries.

    Implementations raise CacheUnavailableError when the storage fails.
    """

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Return the entry stored under key, stale or not."""
        ...

    def put_entry(self, entry: CacheEntry) -> None:
        """Insert or overwrite the entry for entry.key."""
        ...
