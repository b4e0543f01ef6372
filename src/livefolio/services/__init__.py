"""Service layer - consolidation, quote fetching, valuation and closed trades."""

from livefolio.services.consolidator import (
    PositionConsolidator,
    ConsolidationResult,
    merge_nearby_fills,
)
from livefolio.services.quote_chain import QuoteProviderChain, QuoteResolver
from livefolio.services.batch_fetcher import BoundedBatchFetcher
from livefolio.services.ttl_cache import TtlCache
from livefolio.services.valuation import compute_valuation, pending_valuation
from livefolio.services.scheduler import AsyncioScheduler, TimerHandle
from livefolio.services.live_valuation_loop import LiveValuationLoop, ValuationContext
from livefolio.services.top_movers_service import TopMoversService
from livefolio.services.closed_trades_service import (
    ClosedTradesService,
    filter_by_month,
    month_window,
    summarize_month,
)

__all__ = [
    "PositionConsolidator",
    "ConsolidationResult",
    "merge_nearby_fills",
    "QuoteProviderChain",
    "QuoteResolver",
    "BoundedBatchFetcher",
    "TtlCache",
    "compute_valuation",
    "pending_valuation",
    "AsyncioScheduler",
    "TimerHandle",
    "LiveValuationLoop",
    "ValuationContext",
    "TopMoversService",
    "ClosedTradesService",
    "filter_by_month",
    "month_window",
    "summarize_month",
]
