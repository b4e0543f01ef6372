"""Domain models package."""

from livefolio.domain.models.enums import Side, QuoteStatus, LoopState
from livefolio.domain.models.position import (
    RawPositionRow,
    ConsolidatedPosition,
    ClosedTradeRow,
)
from livefolio.domain.models.cache import CacheEntry

__all__ = [
    "Side",
    "QuoteStatus",
    "LoopState",
    "RawPositionRow",
    "ConsolidatedPosition",
    "ClosedTradeRow",
    "CacheEntry",
]
