"""Live valuation loop: periodic quote refresh and profit/loss snapshots."""

import hashlib
import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Optional

from livefolio.core.timezone import now_utc
from livefolio.domain.models import ConsolidatedPosition, LoopState, RawPositionRow
from livefolio.domain.views import (
    PortfolioValuation,
    QuoteFailure,
    QuoteResult,
    results_from_payload,
    results_to_payload,
)
from livefolio.services.batch_fetcher import BoundedBatchFetcher
from livefolio.services.consolidator import ConsolidationResult, PositionConsolidator
from livefolio.services.scheduler import AsyncioScheduler, TimerHandle
from livefolio.services.ttl_cache import TtlCache
from livefolio.services.valuation import compute_valuation, pending_valuation

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL_SECONDS = 30.0

ValuationListener = Callable[[PortfolioValuation], None]


@dataclass(frozen=True)
class ValuationContext:
    """
    Positions and the latest valuation, owned by the loop.

    Replaced as a whole, so readers always see a matching pair.
    """

    positions: tuple[ConsolidatedPosition, ...] = ()
    valuation: PortfolioValuation = field(default_factory=PortfolioValuation)


def quotes_cache_key(symbols: Iterable[str]) -> str:
    """Stable cache key for a set of symbols."""
    joined = ",".join(sorted(set(symbols)))
    digest = hashlib.sha1(joined.encode("utf-8")).hexdigest()
    return f"quotes:{digest}"


class LiveValuationLoop:
    """
    Idle -> Loading -> Rendering -> Idle, triggered by a timer or manually.

    At most one cycle runs at a time: a trigger that arrives while the loop
    is not idle is dropped. refresh() never raises; if quotes cannot be
    loaded every position is reported in error.
    """

    def __init__(
        self,
        fetcher: BoundedBatchFetcher,
        cache: TtlCache,
        consolidator: Optional[PositionConsolidator] = None,
        scheduler: Optional[AsyncioScheduler] = None,
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
    ):
        self._fetcher = fetcher
        self._cache = cache
        self._consolidator = consolidator or PositionConsolidator()
        self._scheduler = scheduler or AsyncioScheduler()
        self._interval = interval_seconds
        self._context = ValuationContext()
        self._state = LoopState.IDLE
        self._timer: Optional[TimerHandle] = None
        self._torn_down = False
        self._listeners: list[ValuationListener] = []

    # State accessors

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def context(self) -> ValuationContext:
        return self._context

    @property
    def positions(self) -> tuple[ConsolidatedPosition, ...]:
        return self._context.positions

    @property
    def valuation(self) -> PortfolioValuation:
        return self._context.valuation

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.cancelled

    @property
    def is_torn_down(self) -> bool:
        return self._torn_down

    def add_listener(self, listener: ValuationListener) -> None:
        """Register a renderer that receives every new valuation."""
        self._listeners.append(listener)

    # Positions

    def load_rows(self, rows: Iterable[RawPositionRow]) -> ConsolidationResult:
        """Consolidate rows and replace the current positions."""
        result = self._consolidator.consolidate(rows)
        self.set_positions(result.positions)
        logger.info(
            f"Loaded {len(result.positions)} positions ({len(result.rejected)} rejected)"
        )
        return result

    def set_positions(self, positions: Iterable[ConsolidatedPosition]) -> None:
        positions = tuple(positions)
        self._context = ValuationContext(
            positions=positions,
            valuation=pending_valuation(positions),
        )

    # Lifecycle

    def start(self, run_immediately: bool = True) -> None:
        """Begin periodic refreshes. Must be called from a running event loop."""
        if self._torn_down:
            raise RuntimeError("Loop has been torn down")
        if self.is_running:
            return
        self._timer = self._scheduler.start(
            self._interval, self.refresh, run_immediately=run_immediately
        )
        logger.info(f"Live valuation started (every {self._interval}s)")

    def teardown(self) -> None:
        """Stop the timer. A cycle already loading finishes but is discarded."""
        self._torn_down = True
        if self._timer is not None:
            self._scheduler.cancel(self._timer)
        logger.info("Live valuation torn down")

    async def wait_closed(self) -> None:
        """Wait for cycles launched by the timer to finish."""
        if self._timer is not None:
            await self._scheduler.join(self._timer)

    # Cycle

    async def refresh(self) -> Optional[PortfolioValuation]:
        """
        Run one valuation cycle.

        Returns the new valuation, or None when the trigger was ignored
        (already loading, or torn down) or the result was discarded.
        """
        if self._torn_down:
            logger.debug("Refresh ignored: loop torn down")
            return None
        if self._state != LoopState.IDLE:
            logger.debug(f"Refresh ignored: loop is {self._state.value}")
            return None

        self._state = LoopState.LOADING
        try:
            context = self._context
            results = await self._load_quotes(p.symbol for p in context.positions)

            if self._torn_down:
                logger.info("Discarding valuation computed after teardown")
                return None
            if self._context.positions is not context.positions:
                logger.info("Discarding valuation for superseded positions")
                return None

            self._state = LoopState.RENDERING
            valuation = compute_valuation(context.positions, results, as_of=now_utc())
            self._context = replace(context, valuation=valuation)
            self._publish(valuation)
            return valuation
        finally:
            self._state = LoopState.IDLE

    async def _load_quotes(self, symbols: Iterable[str]) -> dict[str, QuoteResult]:
        symbols = list(dict.fromkeys(symbols))
        if not symbols:
            return {}

        key = quotes_cache_key(symbols)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"Quote cache hit for {len(symbols)} symbols")
            return results_from_payload(cached)

        try:
            results = await self._fetcher.fetch_all(symbols)
        except Exception as e:  # noqa: BLE001 - the loop always produces a valuation
            logger.exception("Quote fetch failed")
            return {s: QuoteFailure(reason=f"fetch failed: {e}") for s in symbols}

        self._cache.set(key, results_to_payload(results))
        return results

    def _publish(self, valuation: PortfolioValuation) -> None:
        for listener in list(self._listeners):
            try:
                listener(valuation)
            except Exception:  # noqa: BLE001 - renderer errors stay with the renderer
                logger.exception("Valuation listener failed")
