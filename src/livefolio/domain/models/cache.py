"""Cache entry model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """
    A stored payload and the moment it was written.

    Staleness is decided by the reader; stores never expire entries themselves.
    """

    key: str
    stored_at: datetime
    payload: Any

    def age_seconds(self, now: datetime) -> float:
        return (now - self.stored_at).total_seconds()
