"""Application context owning the live valuation services.

Creates the shared HTTP client, the TTL cache, the provider chain, the
live valuation loop and the closed trades service, and tears them down in
order.
"""

import logging
from typing import Optional, Sequence

import httpx
import pytz

from livefolio.config.settings import Settings, get_settings, set_settings
from livefolio.csv import PositionCsvImporter
from livefolio.providers import FinnhubProvider, FinnhubSymbolSource, build_providers
from livefolio.providers.quote_provider import QuoteProvider
from livefolio.repositories.memory import InMemoryCacheStore
from livefolio.repositories.protocols import CacheStore
from livefolio.repositories.sqlalchemy import (
    SqlAlchemyCacheStore,
    get_session_factory,
    init_db,
    reset_database,
)
from livefolio.services import (
    BoundedBatchFetcher,
    ClosedTradesService,
    LiveValuationLoop,
    QuoteProviderChain,
    TopMoversService,
    TtlCache,
)

logger = logging.getLogger(__name__)


class AppContext:
    """
    Application context providing access to all live services.

    Services are built by start() inside the running event loop and
    released by close().
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        providers: Optional[Sequence[QuoteProvider]] = None,
        cache_store: Optional[CacheStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            settings: Settings to use; installed as the global settings.
            providers: Explicit provider list, overriding the configured chain.
            cache_store: Explicit cache backing store, overriding cache_backend.
            http_client: Shared client for HTTP providers (created if omitted).
        """
        if settings is not None:
            set_settings(settings)
        self._settings = settings or get_settings()
        self._providers = list(providers) if providers is not None else None
        self._cache_store = cache_store
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._uses_database = False

        self._cache: Optional[TtlCache] = None
        self._loop: Optional[LiveValuationLoop] = None
        self._movers: Optional[TopMoversService] = None
        self._closed_trades: Optional[ClosedTradesService] = None
        self._started = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def cache(self) -> TtlCache:
        self._require_started()
        return self._cache

    @property
    def loop(self) -> LiveValuationLoop:
        """Get the LiveValuationLoop instance."""
        self._require_started()
        return self._loop

    @property
    def movers(self) -> TopMoversService:
        """Get the TopMoversService instance."""
        self._require_started()
        return self._movers

    @property
    def closed_trades(self) -> ClosedTradesService:
        """Get the ClosedTradesService instance."""
        self._require_started()
        return self._closed_trades

    async def start(self) -> None:
        """Build services, load configured exports and start the refresh timer."""
        if self._started:
            return
        settings = self._settings

        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=settings.provider_timeout_seconds,
                follow_redirects=True,
            )

        self._cache = TtlCache(
            store=self._build_cache_store(),
            ttl_seconds=settings.quote_cache_ttl_seconds,
            version=settings.cache_version,
        )

        providers = self._providers
        if providers is None:
            providers = build_providers(self._http_client, settings)
        fetcher = BoundedBatchFetcher(
            QuoteProviderChain(providers),
            concurrency=settings.batch_concurrency,
            pacing_seconds=settings.batch_pacing_seconds,
        )
        self._loop = LiveValuationLoop(
            fetcher=fetcher,
            cache=self._cache,
            interval_seconds=settings.refresh_interval_seconds,
        )

        movers_fetcher = BoundedBatchFetcher(
            QuoteProviderChain([FinnhubProvider(self._http_client, settings.finnhub_api_key)]),
            concurrency=settings.batch_concurrency,
            pacing_seconds=settings.batch_pacing_seconds,
        )
        self._movers = TopMoversService(
            symbol_source=FinnhubSymbolSource(self._http_client, settings.finnhub_api_key),
            fetcher=movers_fetcher,
            cache=self._cache,
            exchange=settings.movers_exchange,
            symbol_suffix=settings.movers_symbol_suffix,
        )

        self._closed_trades = ClosedTradesService(pytz.timezone(settings.export_timezone))

        if settings.positions_csv:
            self.load_positions_csv(str(settings.positions_csv))
        if settings.closed_trades_csv:
            self.load_closed_trades_csv(str(settings.closed_trades_csv))

        self._started = True
        self._loop.start(run_immediately=settings.refresh_on_start)

    def load_positions_csv(self, path: str) -> None:
        """Load an open positions export into the loop."""
        importer = PositionCsvImporter(pytz.timezone(self._settings.export_timezone))
        imported = importer.read_open_positions(path)
        for error in imported.errors:
            logger.warning(f"{path}: {error}")
        self._loop.load_rows(imported.rows)

    def load_closed_trades_csv(self, path: str) -> None:
        """Load a closed positions export for the monthly summary."""
        self._closed_trades.load_csv(path)

    async def close(self) -> None:
        """Tear down the loop and release resources."""
        if self._loop is not None:
            self._loop.teardown()
            await self._loop.wait_closed()
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
        if self._uses_database:
            reset_database()
        self._started = False

    def _build_cache_store(self) -> CacheStore:
        if self._cache_store is not None:
            return self._cache_store
        if self._settings.cache_backend == "sqlite":
            init_db()
            self._uses_database = True
            return SqlAlchemyCacheStore(get_session_factory())
        return InMemoryCacheStore()

    def _require_started(self) -> None:
        if not self._started and self._loop is None:
            raise RuntimeError("AppContext.start() has not been called")


# Global application context
_app_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Get or create the global application context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext()
    return _app_context


def set_app_context(context: Optional[AppContext]) -> None:
    """Set (or clear) the global application context."""
    global _app_context
    _app_context = context
