"""Profit/loss computation for consolidated positions."""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, Optional, Sequence

from livefolio.domain.models import ConsolidatedPosition, QuoteStatus, Side
from livefolio.domain.views import (
    PortfolioTotals,
    PortfolioValuation,
    PositionValuation,
    QuoteFailure,
    QuoteResult,
)

_PERCENT_QUANT = Decimal("0.01")


def round_percent(value: Decimal) -> Decimal:
    return value.quantize(_PERCENT_QUANT, rounding=ROUND_HALF_UP)


def position_profit(side: Side, open_price: Decimal, current: Decimal, volume: Decimal) -> Decimal:
    """(current - open) * volume, sign-flipped for short positions."""
    direction = Decimal("-1") if side == Side.SELL else Decimal("1")
    return (current - open_price) * volume * direction


def percent_return(side: Side, open_price: Decimal, current: Decimal) -> Decimal:
    """Return on the open price in percent, two decimals."""
    if side == Side.SELL:
        change = open_price - current
    else:
        change = current - open_price
    return round_percent(change / open_price * 100)


def value_position(
    position: ConsolidatedPosition,
    result: Optional[QuoteResult],
) -> PositionValuation:
    """Value one position against its quote; no quote yet means pending."""
    base = dict(
        symbol=position.symbol,
        side=position.side,
        volume=position.total_volume,
        open_price=position.volume_weighted_open_price,
        open_time=position.earliest_open_time,
    )
    if result is None:
        return PositionValuation(status=QuoteStatus.PENDING, **base)
    if isinstance(result, QuoteFailure):
        return PositionValuation(status=QuoteStatus.ERROR, error=result.reason, **base)

    current = result.price
    return PositionValuation(
        status=QuoteStatus.OK,
        current_price=current,
        profit=position_profit(
            position.side, position.volume_weighted_open_price, current, position.total_volume
        ),
        percent_return=percent_return(position.side, position.volume_weighted_open_price, current),
        provider_name=result.provider_name,
        **base,
    )


def compute_totals(
    positions: Sequence[ConsolidatedPosition],
    valuations: Sequence[PositionValuation],
) -> PortfolioTotals:
    """
    Aggregate over ok positions only.

    Positions in error or pending are counted in failed_count but never
    contribute to profit or investment.
    """
    total_profit = Decimal("0")
    total_investment = Decimal("0")
    ok_count = 0
    failed_count = 0

    for position, valuation in zip(positions, valuations):
        if valuation.status != QuoteStatus.OK:
            failed_count += 1
            continue
        total_profit += valuation.profit
        total_investment += position.investment
        ok_count += 1

    average = Decimal("0")
    if total_investment > 0:
        average = round_percent(total_profit / total_investment * 100)

    return PortfolioTotals(
        total_profit=total_profit,
        total_investment=total_investment,
        average_percent_return=average,
        position_count=ok_count,
        failed_count=failed_count,
    )


def compute_valuation(
    positions: Sequence[ConsolidatedPosition],
    results: Mapping[str, QuoteResult],
    as_of: Optional[datetime] = None,
) -> PortfolioValuation:
    """Build a complete valuation snapshot from positions and quote results."""
    valuations = [value_position(p, results.get(p.symbol)) for p in positions]
    return PortfolioValuation(
        positions=tuple(valuations),
        totals=compute_totals(positions, valuations),
        as_of=as_of,
    )


def pending_valuation(positions: Sequence[ConsolidatedPosition]) -> PortfolioValuation:
    """Snapshot shown before the first quotes arrive."""
    return compute_valuation(positions, {})
