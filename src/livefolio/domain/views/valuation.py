"""View models for valuation snapshots."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from livefolio.domain.models.enums import QuoteStatus, Side


@dataclass(frozen=True)
class PositionValuation:
    """Live profit/loss for one consolidated position."""

    symbol: str
    side: Side
    volume: Decimal
    open_price: Decimal
    status: QuoteStatus
    current_price: Optional[Decimal] = None
    profit: Optional[Decimal] = None
    percent_return: Optional[Decimal] = None
    provider_name: Optional[str] = None
    error: Optional[str] = None
    open_time: Optional[datetime] = None


@dataclass(frozen=True)
class PortfolioTotals:
    """Aggregates over positions with a resolved quote only."""

    total_profit: Decimal = field(default_factory=lambda: Decimal("0"))
    total_investment: Decimal = field(default_factory=lambda: Decimal("0"))
    average_percent_return: Decimal = field(default_factory=lambda: Decimal("0"))
    position_count: int = 0
    failed_count: int = 0


@dataclass(frozen=True)
class PortfolioValuation:
    """
    Snapshot handed to renderers.

    Replaced as a whole each cycle; never updated in place.
    """

    positions: tuple[PositionValuation, ...] = ()
    totals: PortfolioTotals = field(default_factory=PortfolioTotals)
    as_of: Optional[datetime] = None
