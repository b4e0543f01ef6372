"""Dependency injection for FastAPI."""

from livefolio.app_context import AppContext, get_app_context
from livefolio.services import ClosedTradesService, LiveValuationLoop, TopMoversService


def get_context() -> AppContext:
    """Provide the started application context."""
    return get_app_context()


def get_valuation_loop() -> LiveValuationLoop:
    """Provide the LiveValuationLoop instance."""
    return get_app_context().loop


def get_movers_service() -> TopMoversService:
    """Provide the TopMoversService instance."""
    return get_app_context().movers


def get_closed_trades_service() -> ClosedTradesService:
    """Provide the ClosedTradesService instance."""
    return get_app_context().closed_trades
