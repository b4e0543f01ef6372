"""View models for realized (closed) trades."""

from dataclasses import dataclass, field
from decimal import Decimal

from livefolio.domain.models import ClosedTradeRow


@dataclass(frozen=True)
class MonthlySummary:
    """Realized results for one calendar month in the export timezone."""

    year: int
    month: int
    trades: tuple[ClosedTradeRow, ...] = ()
    turnover: Decimal = field(default_factory=lambda: Decimal("0"))
    saldo: Decimal = field(default_factory=lambda: Decimal("0"))
    average_percent_return: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def trade_count(self) -> int:
        return len(self.trades)
