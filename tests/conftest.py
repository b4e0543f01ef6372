"""
Pytest configuration and fixtures for live valuation tests.

This module provides:
- Scripted fake quote providers
- A controllable clock for TTL cache tests
- httpx mock-transport clients for provider tests
- In-memory SQLite database fixtures
- Sample brokerage export rows and CSV content
- FastAPI test client wired to fake providers
"""

import asyncio
import os
import tempfile
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker

from livefolio.app_context import AppContext, set_app_context
from livefolio.config.settings import Settings, reset_settings
from livefolio.core.timezone import UTC
from livefolio.domain.models import RawPositionRow, Side
from livefolio.domain.views import QuoteFailure, QuoteResult, QuoteSuccess
from livefolio.repositories.memory import InMemoryCacheStore
from livefolio.repositories.sqlalchemy.database import Base
# Import ORM models to register them with Base before creating tables
from livefolio.repositories.sqlalchemy import orm_models  # noqa: F401
from livefolio.repositories.sqlalchemy import SqlAlchemyCacheStore
from livefolio.services import TtlCache


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create an aware UTC datetime."""
    return UTC.localize(datetime(year, month, day, hour, minute, second))


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or utc_datetime(2024, 3, 1, 9, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    """Provide a controllable clock."""
    return FakeClock()


def run(coro):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


# =============================================================================
# FAKE PROVIDERS
# =============================================================================


class ScriptedProvider:
    """
    Quote provider returning fixed results per symbol.

    Records every symbol it is asked for. An optional delay simulates latency.
    """

    def __init__(
        self,
        name: str,
        prices: Optional[dict[str, str]] = None,
        default: Optional[QuoteResult] = None,
        delay: float = 0.0,
    ):
        self.name = name
        self._prices = {k: Decimal(v) for k, v in (prices or {}).items()}
        self._default = default or QuoteFailure(reason=f"{name}: unknown symbol")
        self._delay = delay
        self.calls: list[str] = []

    async def attempt(self, symbol: str) -> QuoteResult:
        self.calls.append(symbol)
        if self._delay:
            await asyncio.sleep(self._delay)
        if symbol in self._prices:
            return QuoteSuccess(price=self._prices[symbol], provider_name=self.name)
        return self._default


class RaisingProvider:
    """Provider that breaks its contract and raises."""

    def __init__(self, name: str = "raising"):
        self.name = name
        self.calls: list[str] = []

    async def attempt(self, symbol: str) -> QuoteResult:
        self.calls.append(symbol)
        raise ConnectionError("Network unavailable")


class InFlightResolver:
    """Resolver that tracks how many resolutions are in flight at once."""

    def __init__(self, delay: float = 0.01, fail: frozenset = frozenset()):
        self._delay = delay
        self._fail = fail
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls: list[str] = []

    async def resolve(self, symbol: str) -> QuoteResult:
        self.calls.append(symbol)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._delay)
        finally:
            self.in_flight -= 1
        if symbol in self._fail:
            raise RuntimeError(f"boom {symbol}")
        return QuoteSuccess(price=Decimal("1"), provider_name="resolver")


async def no_sleep(seconds: float) -> None:
    """Pacing replacement that yields without waiting."""
    await asyncio.sleep(0)


# =============================================================================
# HTTP MOCK HELPERS
# =============================================================================


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def chart_body(price, previous_close=None) -> dict:
    """Minimal Yahoo chart response."""
    meta = {"regularMarketPrice": price}
    if previous_close is not None:
        meta["chartPreviousClose"] = previous_close
    return {"chart": {"result": [{"meta": meta}], "error": None}}


# =============================================================================
# CACHE FIXTURES
# =============================================================================


@pytest.fixture
def memory_store() -> InMemoryCacheStore:
    """Provide an empty in-memory cache store."""
    return InMemoryCacheStore()


@pytest.fixture
def ttl_cache(memory_store, clock) -> TtlCache:
    """Provide a TTL cache over the memory store with a fake clock."""
    return TtlCache(store=memory_store, ttl_seconds=180, version="fx_v1", clock=clock)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(test_engine) -> sessionmaker:
    """Provide a session factory bound to the test engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def sqlite_store(session_factory) -> SqlAlchemyCacheStore:
    """Provide test SqlAlchemyCacheStore."""
    return SqlAlchemyCacheStore(session_factory)


# =============================================================================
# PRESET DATA
# =============================================================================


def make_row(
    symbol: str,
    side: str = "BUY",
    volume: str = "1",
    open_price: str = "100",
    market_price: Optional[str] = None,
    open_time: Optional[datetime] = None,
) -> RawPositionRow:
    """Helper to create a raw position row from strings."""
    return RawPositionRow(
        symbol=symbol,
        side=Side(side),
        volume=Decimal(volume),
        open_price=Decimal(open_price),
        market_price=None if market_price is None else Decimal(market_price),
        open_time=open_time,
    )


@pytest.fixture
def sample_rows() -> list[RawPositionRow]:
    """Two IFX buys, one SAP buy and one CBK short."""
    return [
        make_row("IFX.DE", "BUY", "10", "30.00", "33.10", utc_datetime(2024, 3, 1, 9, 15)),
        make_row("SAP.DE", "BUY", "2", "180.00", "250.00", utc_datetime(2024, 2, 1, 10, 0)),
        make_row("IFX.DE", "BUY", "30", "34.00", "33.20", utc_datetime(2024, 2, 20, 11, 0)),
        make_row("CBK.DE", "SELL", "100", "12.00", None, None),
    ]


# =============================================================================
# TEMP FILE FIXTURES
# =============================================================================


@pytest.fixture
def temp_csv_file():
    """Provide a temporary CSV file path that is cleaned up after test."""
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".csv",
        delete=False,
        encoding="utf-8",
    ) as f:
        tmp_path = f.name

    yield tmp_path

    # Cleanup
    if os.path.exists(tmp_path):
        os.unlink(tmp_path)


@pytest.fixture
def open_positions_csv_content() -> str:
    """Open positions sheet as exported by the broker."""
    return """Position,Symbol,Type,Volume,Open time,Open price,Market price,Purchase value
1001,IFX.DE,BUY,10,2024-03-01 09:15:02,"30,00",33.10,300.00
1002,SAP.DE,BUY,2,45352.5,180.00,250.00,360.00
1003,CBK.DE,SELL,100,,12.00,,1200.00
"""


@pytest.fixture
def closed_positions_csv_content() -> str:
    """Closed positions sheet with two partial fills of one trade."""
    return """Position,Symbol,Type,Volume,Open time,Open price,Close time,Close price,Gross P/L
2001,DTE.DE,BUY,5,2024-01-10 09:00:00,20.00,2024-03-01 15:00:00,22.00,10.00
2002,DTE.DE,BUY,15,2024-01-10 09:00:05,20.00,2024-03-01 15:00:20,24.00,60.00
2003,SAP.DE,BUY,1,2024-01-11 09:00:00,170.00,2024-03-02 10:00:00,175.00,5.00
"""


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


def movers_transport_handler(request: httpx.Request) -> httpx.Response:
    """Finnhub stand-in for the movers endpoint: three XETRA listings."""
    if request.url.path.endswith("/stock/symbol"):
        return httpx.Response(200, json=[
            {"symbol": "SAP.DE", "displaySymbol": "SAP.DE"},
            {"symbol": "IFX.DE", "displaySymbol": "IFX.DE"},
            {"symbol": "DTE.DE", "displaySymbol": "DTE.DE"},
            {"symbol": "AAPL", "displaySymbol": "AAPL"},
        ])
    changes = {"SAP.DE": 2.5, "IFX.DE": -1.25, "DTE.DE": 0.5}
    symbol = request.url.params.get("symbol")
    return httpx.Response(200, json={"c": 100.0, "dp": changes.get(symbol, 0)})


@pytest.fixture
def api_provider() -> ScriptedProvider:
    """Provider backing the API client."""
    return ScriptedProvider("scripted", {"IFX.DE": "33.00", "SAP.DE": "250.00"})


@pytest.fixture
def client(api_provider) -> TestClient:
    """Provide FastAPI test client with fake providers and an in-memory cache."""
    from livefolio.main import app

    settings = Settings(
        refresh_on_start=False,
        refresh_interval_seconds=3600,
        cache_backend="memory",
        batch_pacing_seconds=0,
        quote_providers=[],
        positions_csv=None,
    )
    context = AppContext(
        settings=settings,
        providers=[api_provider],
        http_client=mock_client(movers_transport_handler),
    )
    set_app_context(context)
    with TestClient(app) as c:
        yield c
    set_app_context(None)
    reset_settings()
