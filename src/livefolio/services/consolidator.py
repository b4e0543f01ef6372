"""Position consolidation and near-duplicate fill merging."""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from livefolio.core.exceptions import ConsolidationRejectedError
from livefolio.domain.models import (
    ClosedTradeRow,
    ConsolidatedPosition,
    RawPositionRow,
    Side,
)

logger = logging.getLogger(__name__)

NEARBY_FILL_WINDOW = timedelta(seconds=60)


@dataclass
class ConsolidationResult:
    """Consolidated positions plus the groups that were dropped."""

    positions: tuple[ConsolidatedPosition, ...] = ()
    rejected: list[ConsolidationRejectedError] = field(default_factory=list)


@dataclass
class _Group:
    symbol: str
    side: Side
    volume: Decimal = field(default_factory=lambda: Decimal("0"))
    weighted_open_total: Decimal = field(default_factory=lambda: Decimal("0"))
    market_price: Optional[Decimal] = None
    earliest_open_time: Optional[datetime] = None
    invalid_reason: Optional[str] = None


class PositionConsolidator:
    """
    Merges raw position rows into one position per (symbol, side).

    Volume is summed and the open price is volume-weighted. The market price
    is last-write-wins in row order, ignoring rows that carry none.
    """

    def consolidate(self, rows: Iterable[RawPositionRow]) -> ConsolidationResult:
        groups: dict[tuple[str, Side], _Group] = {}

        for row in rows:
            symbol = (row.symbol or "").strip()
            key = (symbol, row.side)
            group = groups.get(key)
            if group is None:
                group = groups[key] = _Group(symbol=symbol, side=row.side)

            if not (row.volume.is_finite() and row.open_price.is_finite()):
                group.invalid_reason = (
                    f"non-finite volume or open price ({row.volume}, {row.open_price})"
                )
                continue
            group.volume += row.volume
            group.weighted_open_total += row.open_price * row.volume
            if row.market_price is not None and row.market_price.is_finite():
                group.market_price = row.market_price
            if row.open_time is not None and (
                group.earliest_open_time is None or row.open_time < group.earliest_open_time
            ):
                group.earliest_open_time = row.open_time

        result = ConsolidationResult()
        positions = []
        for group in groups.values():
            position = self._build(group, result.rejected)
            if position is not None:
                positions.append(position)
        result.positions = tuple(positions)
        return result

    @staticmethod
    def _build(
        group: _Group,
        rejected: list[ConsolidationRejectedError],
    ) -> Optional[ConsolidatedPosition]:
        """Validate a group and build its position, or record why it was dropped."""
        reason = None
        if not group.symbol:
            reason = "blank symbol"
        elif group.invalid_reason is not None:
            reason = group.invalid_reason
        elif group.volume <= 0:
            reason = f"non-positive volume {group.volume}"
        else:
            open_price = group.weighted_open_total / group.volume
            if open_price <= 0:
                reason = f"non-positive open price {open_price}"

        if reason is not None:
            error = ConsolidationRejectedError(group.symbol, group.side.value, reason)
            logger.warning(error.message)
            rejected.append(error)
            return None

        return ConsolidatedPosition(
            symbol=group.symbol,
            side=group.side,
            total_volume=group.volume,
            volume_weighted_open_price=open_price,
            last_known_market_price=group.market_price,
            earliest_open_time=group.earliest_open_time,
        )


def _weighted(price_a: Decimal, vol_a: Decimal, price_b: Decimal, vol_b: Decimal) -> Decimal:
    total = vol_a + vol_b
    if not total:
        return price_a
    return (price_a * vol_a + price_b * vol_b) / total


def merge_nearby_fills(
    trades: Sequence[ClosedTradeRow],
    window: timedelta = NEARBY_FILL_WINDOW,
) -> list[ClosedTradeRow]:
    """
    Fold partial fills of the same closed trade into one record.

    A trade is merged into the previous merged record when both have the same
    symbol and their close times are within `window`. Volume and gross profit
    are summed; open and close prices become volume-weighted. Trades without a
    close time are skipped.
    """
    merged: list[ClosedTradeRow] = []
    for trade in trades:
        if trade.close_time is None:
            logger.debug(f"Skipping closed trade without close time: {trade.symbol}")
            continue

        prev = merged[-1] if merged else None
        if (
            prev is not None
            and prev.symbol == trade.symbol
            and abs(trade.close_time - prev.close_time) <= window
        ):
            merged[-1] = replace(
                prev,
                volume=prev.volume + trade.volume,
                gross_profit=prev.gross_profit + trade.gross_profit,
                close_price=_weighted(prev.close_price, prev.volume, trade.close_price, trade.volume),
                open_price=_weighted(prev.open_price, prev.volume, trade.open_price, trade.volume),
            )
        else:
            merged.append(trade)
    return merged
