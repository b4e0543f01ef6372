"""Yahoo Finance chart-endpoint providers."""

import json
import logging
from decimal import Decimal
from typing import Optional
from urllib.parse import quote

import httpx

from livefolio.core.exceptions import ProviderError
from livefolio.providers.quote_provider import (
    HttpQuoteProvider,
    change_from_previous_close,
    parse_price,
)

logger = logging.getLogger(__name__)

CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
PROXY_URL = "https://api.allorigins.win/get"
BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "application/json",
}


def price_from_chart(provider: str, data: object) -> tuple[Decimal, Optional[Decimal]]:
    """Extract (regularMarketPrice, change %) from a chart response body."""
    try:
        meta = data["chart"]["result"][0]["meta"]
    except (KeyError, IndexError, TypeError):
        raise ProviderError(provider, "no chart meta in response")
    price = parse_price(provider, meta.get("regularMarketPrice"))
    previous_close = meta.get("chartPreviousClose") or meta.get("previousClose")
    return price, change_from_previous_close(price, previous_close)


class YahooChartProvider(HttpQuoteProvider):
    """Direct call to the Yahoo chart endpoint. Uses the symbol as exported (e.g. IFX.DE)."""

    name = "yahoo"

    async def _fetch(self, symbol: str) -> tuple[Decimal, Optional[Decimal]]:
        data = await self._get_json(
            CHART_URL.format(symbol=quote(symbol, safe="")),
            headers=BROWSER_HEADERS,
        )
        return price_from_chart(self.name, data)


class YahooProxyProvider(HttpQuoteProvider):
    """The chart endpoint relayed through a public proxy that wraps the body in `contents`."""

    name = "yahoo_proxy"

    async def _fetch(self, symbol: str) -> tuple[Decimal, Optional[Decimal]]:
        target = CHART_URL.format(symbol=quote(symbol, safe=""))
        wrapper = await self._get_json(PROXY_URL, params={"url": target})
        contents = wrapper.get("contents") if isinstance(wrapper, dict) else None
        if not contents:
            raise ProviderError(self.name, "empty proxy contents")
        return price_from_chart(self.name, json.loads(contents))


def suffix_variants(symbol: str) -> list[str]:
    """
    Alternative exchange listings for a symbol.

    German listings are tried on Frankfurt and XETRA, and bare symbols get a .DE suffix.
    """
    clean = symbol.replace("/", "").upper()
    candidates = []
    if symbol.upper().endswith(".DE"):
        candidates.append(symbol[:-3] + ".F")
        candidates.append(symbol[:-3] + ".XETRA")
    else:
        candidates.append(clean + ".DE")
    seen = {symbol}
    variants = []
    for candidate in candidates:
        if candidate not in seen:
            seen.add(candidate)
            variants.append(candidate)
    return variants


class YahooSuffixFallbackProvider(HttpQuoteProvider):
    """
    Retries the chart endpoint with alternative exchange suffixes.

    Several HTTP calls may be made, but to the chain this is a single attempt.
    """

    name = "yahoo_fallback"

    async def _fetch(self, symbol: str) -> tuple[Decimal, Optional[Decimal]]:
        for variant in suffix_variants(symbol):
            try:
                data = await self._get_json(
                    CHART_URL.format(symbol=quote(variant, safe="")),
                    headers=BROWSER_HEADERS,
                )
                price, change = price_from_chart(self.name, data)
            except (ProviderError, httpx.HTTPError, ValueError) as e:
                logger.debug(f"Yahoo variant {variant} failed for {symbol}: {e}")
                continue
            logger.debug(f"Yahoo variant {variant} priced {symbol} at {price}")
            return price, change
        raise ProviderError(self.name, "all suffix variants failed")
