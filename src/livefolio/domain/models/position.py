"""Position and trade row domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from livefolio.domain.models.enums import Side


@dataclass(frozen=True)
class RawPositionRow:
    """
    One open-position line from a brokerage export.

    Produced by the ingestion collaborator; never mutated.
    """

    symbol: str
    side: Side
    volume: Decimal
    open_price: Decimal
    market_price: Optional[Decimal] = None
    open_time: Optional[datetime] = None

    def __post_init__(self) -> None:
        if isinstance(self.side, str) and not isinstance(self.side, Side):
            object.__setattr__(self, "side", Side(self.side.upper()))


@dataclass(frozen=True)
class ConsolidatedPosition:
    """
    One netted exposure per (symbol, side).

    Only built by the consolidator once total_volume and
    volume_weighted_open_price are known to be positive.
    """

    symbol: str
    side: Side
    total_volume: Decimal
    volume_weighted_open_price: Decimal
    last_known_market_price: Optional[Decimal] = None
    earliest_open_time: Optional[datetime] = None

    @property
    def key(self) -> tuple[str, Side]:
        return (self.symbol, self.side)

    @property
    def investment(self) -> Decimal:
        """Capital committed at the open price."""
        return self.total_volume * self.volume_weighted_open_price

    def as_row(self) -> RawPositionRow:
        """Return this position as a single raw row."""
        return RawPositionRow(
            symbol=self.symbol,
            side=self.side,
            volume=self.total_volume,
            open_price=self.volume_weighted_open_price,
            market_price=self.last_known_market_price,
            open_time=self.earliest_open_time,
        )


@dataclass(frozen=True)
class ClosedTradeRow:
    """One closed-position line from a brokerage export."""

    symbol: str
    side: Side
    volume: Decimal
    open_price: Decimal
    close_price: Decimal
    close_time: Optional[datetime] = None
    gross_profit: Decimal = field(default_factory=lambda: Decimal("0"))
