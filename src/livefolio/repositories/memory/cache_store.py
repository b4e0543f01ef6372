"""In-process CacheStore backed by a dict."""

from typing import Optional

from livefolio.domain.models import CacheEntry


class InMemoryCacheStore:
    """Process-lifetime cache store. Last write for a key wins."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def put_entry(self, entry: CacheEntry) -> None:
        self._entries[entry.key] = entry

    def __len__(self) -> int:
        return len(self._entries)
