"""Binance spot ticker provider for crypto symbols."""

from decimal import Decimal
from typing import Optional

from livefolio.core.exceptions import ProviderError
from livefolio.providers.quote_provider import HttpQuoteProvider, parse_price

TICKER_URL = "https://api.binance.com/api/v3/ticker/price"
CRYPTO_MARKERS = ("BTC", "ETH", "USD")


def is_crypto_symbol(symbol: str) -> bool:
    upper = symbol.upper()
    return any(marker in upper for marker in CRYPTO_MARKERS)


def to_binance_pair(symbol: str) -> str:
    """BTC/USD -> BTCUSDT, ETH -> ETHUSDT, BTCUSDT stays as is."""
    clean = symbol.replace("/", "").replace("-", "").upper()
    if clean.endswith("USDT"):
        return clean
    if clean.endswith("USD"):
        return clean + "T"
    return clean + "USDT"


class BinanceProvider(HttpQuoteProvider):
    """Prices crypto pairs in USDT. Non-crypto symbols fail without a network call."""

    name = "binance"

    async def _fetch(self, symbol: str) -> tuple[Decimal, Optional[Decimal]]:
        if not is_crypto_symbol(symbol):
            raise ProviderError(self.name, "not a crypto symbol")
        data = await self._get_json(TICKER_URL, params={"symbol": to_binance_pair(symbol)})
        if not isinstance(data, dict):
            raise ProviderError(self.name, "unexpected response shape")
        return parse_price(self.name, data.get("price")), None
