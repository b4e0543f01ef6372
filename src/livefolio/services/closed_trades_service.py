"""Monthly summary of realized trades from a closed positions export."""

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

import pytz
from dateutil.relativedelta import relativedelta

from livefolio.core.timezone import EXPORT_TZ, now_utc
from livefolio.csv import PositionCsvImporter, RowImport
from livefolio.domain.models import ClosedTradeRow
from livefolio.domain.views import MonthlySummary
from livefolio.services.consolidator import merge_nearby_fills
from livefolio.services.valuation import round_percent

logger = logging.getLogger(__name__)


def month_window(
    now: datetime,
    offset: int = 0,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> tuple[datetime, datetime]:
    """
    First instant of the month `offset` months away from `now`, and of the one after.

    Months are calendar months in `tz` (the export timezone by default).
    """
    tz = tz or EXPORT_TZ
    local = now.astimezone(tz)
    first = datetime(local.year, local.month, 1) + relativedelta(months=offset)
    return tz.localize(first), tz.localize(first + relativedelta(months=1))


def filter_by_month(
    trades: Iterable[ClosedTradeRow],
    start: datetime,
    end: datetime,
) -> list[ClosedTradeRow]:
    """Trades closed in [start, end). Trades without a close time never match."""
    return [
        t for t in trades
        if t.close_time is not None and start <= t.close_time < end
    ]


def summarize_month(
    trades: Sequence[ClosedTradeRow],
    year: int,
    month: int,
) -> MonthlySummary:
    """
    Turnover, saldo and cost-weighted percent return for a month's trades.

    Turnover is volume * close price and saldo is the gross P/L, both summed.
    The percent return weights each trade's P/L percent by its cost
    (volume * open price); trades opened at zero are left out of it and an
    empty or non-positive cost base gives 0.
    """
    turnover = sum((t.volume * t.close_price for t in trades), Decimal("0"))
    saldo = sum((t.gross_profit for t in trades), Decimal("0"))

    cost_base = Decimal("0")
    weighted_profit = Decimal("0")
    for t in trades:
        if t.open_price == 0:
            continue
        cost_base += t.volume * t.open_price
        weighted_profit += t.gross_profit

    average = Decimal("0")
    if cost_base > 0:
        average = round_percent(weighted_profit / cost_base * 100)

    return MonthlySummary(
        year=year,
        month=month,
        trades=tuple(trades),
        turnover=turnover,
        saldo=saldo,
        average_percent_return=average,
    )


class ClosedTradesService:
    """
    Holds the realized trades of a closed positions export.

    Partial fills are merged on load; summaries are computed per calendar
    month relative to the current month.
    """

    def __init__(
        self,
        export_tz: Optional[pytz.BaseTzInfo] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._tz = export_tz or EXPORT_TZ
        self._clock = clock
        self._importer = PositionCsvImporter(self._tz)
        self._trades: tuple[ClosedTradeRow, ...] = ()

    @property
    def trades(self) -> tuple[ClosedTradeRow, ...]:
        return self._trades

    def load_csv(self, path: str | Path) -> RowImport[ClosedTradeRow]:
        """Read a closed positions sheet and replace the held trades."""
        imported = self._importer.read_closed_trades(path)
        for error in imported.errors:
            logger.warning(f"{path}: {error}")
        self.set_trades(imported.rows)
        return imported

    def set_trades(self, trades: Iterable[ClosedTradeRow]) -> None:
        """Order trades by close time and fold partial fills together."""
        dated = [t for t in trades if t.close_time is not None]
        dated.sort(key=lambda t: t.close_time)
        self._trades = tuple(merge_nearby_fills(dated))
        logger.info(f"Loaded {len(self._trades)} closed trades")

    def summary(self, offset: int = 0) -> MonthlySummary:
        """Summary for the month `offset` months from now (0 = current, -1 = previous)."""
        start, end = month_window(self._clock(), offset, self._tz)
        return summarize_month(filter_by_month(self._trades, start, end), start.year, start.month)
