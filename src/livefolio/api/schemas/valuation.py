"""Pydantic schemas for valuation and positions API."""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

from livefolio.domain.models import ConsolidatedPosition
from livefolio.domain.views import PortfolioValuation, PositionValuation


def _float(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


class PositionValuationOut(BaseModel):
    """One row of the live positions table."""

    symbol: str
    side: str
    volume: float
    open_price: float
    current_price: Optional[float] = None
    profit: Optional[float] = None
    percent_return: Optional[float] = None
    status: Literal["ok", "error", "pending"]
    provider: Optional[str] = None
    error: Optional[str] = None
    open_time: Optional[datetime] = None

    @classmethod
    def from_view(cls, view: PositionValuation) -> "PositionValuationOut":
        return cls(
            symbol=view.symbol,
            side=view.side.value,
            volume=float(view.volume),
            open_price=float(view.open_price),
            current_price=_float(view.current_price),
            profit=_float(view.profit),
            percent_return=_float(view.percent_return),
            status=view.status.value,
            provider=view.provider_name,
            error=view.error,
            open_time=view.open_time,
        )


class PortfolioTotalsOut(BaseModel):
    """Summary row: totals over positions with a live quote."""

    total_profit: float
    total_investment: float
    average_percent_return: float
    position_count: int
    failed_count: int


class PortfolioValuationOut(BaseModel):
    """Full valuation snapshot."""

    state: str
    as_of: Optional[datetime] = None
    positions: list[PositionValuationOut]
    totals: PortfolioTotalsOut

    @classmethod
    def from_view(cls, view: PortfolioValuation, state: str) -> "PortfolioValuationOut":
        totals = view.totals
        return cls(
            state=state,
            as_of=view.as_of,
            positions=[PositionValuationOut.from_view(p) for p in view.positions],
            totals=PortfolioTotalsOut(
                total_profit=float(totals.total_profit),
                total_investment=float(totals.total_investment),
                average_percent_return=float(totals.average_percent_return),
                position_count=totals.position_count,
                failed_count=totals.failed_count,
            ),
        )


class RefreshResponse(BaseModel):
    """Result of a manual refresh trigger."""

    status: Literal["refreshed", "busy", "stopped", "discarded"]
    valuation: Optional[PortfolioValuationOut] = None


class RawPositionIn(BaseModel):
    """Open position line as sent by the ingestion side."""

    symbol: str
    side: Literal["BUY", "SELL"]
    volume: Decimal
    open_price: Decimal
    market_price: Optional[Decimal] = None
    open_time: Optional[datetime] = None


class PositionsReplace(BaseModel):
    """Body for POST /positions."""

    rows: list[RawPositionIn] = Field(default_factory=list)


class PositionOut(BaseModel):
    """A consolidated position."""

    symbol: str
    side: str
    total_volume: float
    open_price: float
    last_known_market_price: Optional[float] = None
    earliest_open_time: Optional[datetime] = None

    @classmethod
    def from_model(cls, position: ConsolidatedPosition) -> "PositionOut":
        return cls(
            symbol=position.symbol,
            side=position.side.value,
            total_volume=float(position.total_volume),
            open_price=float(position.volume_weighted_open_price),
            last_known_market_price=_float(position.last_known_market_price),
            earliest_open_time=position.earliest_open_time,
        )


class PositionsResponse(BaseModel):
    """Consolidated positions plus any groups dropped while consolidating."""

    positions: list[PositionOut]
    rejected: list[str] = Field(default_factory=list)
