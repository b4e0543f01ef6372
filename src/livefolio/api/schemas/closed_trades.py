"""Pydantic schemas for the closed trades API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from livefolio.domain.models import ClosedTradeRow
from livefolio.domain.views import MonthlySummary


class ClosedTradeOut(BaseModel):
    symbol: str
    side: str
    volume: float
    open_price: float
    close_price: float
    close_time: Optional[datetime] = None
    gross_profit: float

    @classmethod
    def from_model(cls, trade: ClosedTradeRow) -> "ClosedTradeOut":
        return cls(
            symbol=trade.symbol,
            side=trade.side.value,
            volume=float(trade.volume),
            open_price=float(trade.open_price),
            close_price=float(trade.close_price),
            close_time=trade.close_time,
            gross_profit=float(trade.gross_profit),
        )


class MonthlySummaryResponse(BaseModel):
    """Realized results for one month."""

    year: int
    month: int
    offset: int
    turnover: float
    saldo: float
    average_percent_return: float
    trade_count: int
    trades: list[ClosedTradeOut]

    @classmethod
    def from_view(cls, view: MonthlySummary, offset: int) -> "MonthlySummaryResponse":
        return cls(
            year=view.year,
            month=view.month,
            offset=offset,
            turnover=float(view.turnover),
            saldo=float(view.saldo),
            average_percent_return=float(view.average_percent_return),
            trade_count=view.trade_count,
            trades=[ClosedTradeOut.from_model(t) for t in view.trades],
        )
