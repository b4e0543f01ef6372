"""
yfinance-backed provider.

yfinance is blocking, so each lookup runs in a worker thread.
"""

import asyncio
from decimal import Decimal
from typing import Optional

from livefolio.core.exceptions import ProviderError
from livefolio.providers.quote_provider import (
    BaseQuoteProvider,
    change_from_previous_close,
    parse_price,
)


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _lookup_info(symbol: str) -> dict:
    info = _get_yf().Ticker(symbol).info
    return info if isinstance(info, dict) else {}


class YFinanceProvider(BaseQuoteProvider):
    """Ticker.info: currentPrice preferred, then regularMarketPrice."""

    name = "yfinance"

    async def _fetch(self, symbol: str) -> tuple[Decimal, Optional[Decimal]]:
        try:
            info = await asyncio.to_thread(_lookup_info, symbol)
        except Exception as e:  # noqa: BLE001 - yfinance raises arbitrary errors on bad symbols
            raise ProviderError(self.name, f"lookup failed: {e}")
        raw_price = info.get("currentPrice")
        if raw_price is None:
            raw_price = info.get("regularMarketPrice")
        price = parse_price(self.name, raw_price)
        previous_close = info.get("previousClose") or info.get("regularMarketPreviousClose")
        return price, change_from_previous_close(price, previous_close)
