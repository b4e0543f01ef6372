"""Pydantic schemas for API request/response validation."""

from livefolio.api.schemas.valuation import (
    PositionValuationOut,
    PortfolioTotalsOut,
    PortfolioValuationOut,
    RefreshResponse,
    RawPositionIn,
    PositionsReplace,
    PositionOut,
    PositionsResponse,
)
from livefolio.api.schemas.movers import MoverOut, MoversResponse
from livefolio.api.schemas.closed_trades import ClosedTradeOut, MonthlySummaryResponse

__all__ = [
    "PositionValuationOut",
    "PortfolioTotalsOut",
    "PortfolioValuationOut",
    "RefreshResponse",
    "RawPositionIn",
    "PositionsReplace",
    "PositionOut",
    "PositionsResponse",
    "MoverOut",
    "MoversResponse",
    "ClosedTradeOut",
    "MonthlySummaryResponse",
]
