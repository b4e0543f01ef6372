"""API routers package."""

from livefolio.api.routers.valuation import router as valuation_router
from livefolio.api.routers.movers import router as movers_router
from livefolio.api.routers.closed_trades import router as closed_trades_router

__all__ = [
    "valuation_router",
    "movers_router",
    "closed_trades_router",
]
