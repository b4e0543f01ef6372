"""Versioned time-to-live cache over a CacheStore."""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from livefolio.core.exceptions import CacheUnavailableError
from livefolio.core.timezone import now_utc
from livefolio.domain.models import CacheEntry
from livefolio.repositories.protocols import CacheStore

logger = logging.getLogger(__name__)


class TtlCache:
    """
    Best-effort cache with a fixed TTL and a version namespace.

    Keys are stored as "<version>:<key>", so bumping the version hides every
    earlier entry. Stale entries read as absent but are left in the store.
    Store failures are logged and never raised: reads miss, writes are dropped.
    """

    def __init__(
        self,
        store: CacheStore,
        ttl_seconds: float,
        version: str,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._store = store
        self._ttl = ttl_seconds
        self._version = version
        self._clock = clock

    @property
    def version(self) -> str:
        return self._version

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def namespaced(self, key: str) -> str:
        return f"{self._version}:{key}"

    def get(self, key: str) -> Optional[Any]:
        """Return the payload for key, or None when missing, stale or unreadable."""
        try:
            entry = self._store.get_entry(self.namespaced(key))
        except CacheUnavailableError as e:
            logger.warning(f"{e.message}; treating {key} as a miss")
            return None
        if entry is None:
            return None
        if entry.age_seconds(self._clock()) >= self._ttl:
            return None
        return entry.payload

    def set(self, key: str, payload: Any) -> None:
        """Store payload under key. Failures are dropped."""
        entry = CacheEntry(key=self.namespaced(key), stored_at=self._clock(), payload=payload)
        try:
            self._store.put_entry(entry)
        except CacheUnavailableError as e:
            logger.warning(f"{e.message}; dropping write for {key}")
