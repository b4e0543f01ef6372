"""View models for exchange top movers."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Mover:
    """Daily change for one symbol."""

    symbol: str
    change_percent: Decimal


@dataclass(frozen=True)
class MoversView:
    """Ranked gainers and losers for an exchange."""

    exchange: str
    gainers: tuple[Mover, ...] = ()
    losers: tuple[Mover, ...] = ()
    as_of: Optional[datetime] = None
    note: Optional[str] = field(default=None)
