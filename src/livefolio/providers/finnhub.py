"""Finnhub quote provider and exchange symbol listing."""

from decimal import Decimal
from typing import Optional

import httpx

from livefolio.core.exceptions import ProviderError
from livefolio.providers.quote_provider import (
    HttpQuoteProvider,
    parse_change_percent,
    parse_price,
)

BASE_URL = "https://finnhub.io/api/v1"


class FinnhubProvider(HttpQuoteProvider):
    """
    Finnhub /quote endpoint.

    Response shape: {c: current, d: change, dp: change %, h, l, o, pc}.
    Unknown symbols come back as c == 0.
    """

    name = "finnhub"

    def __init__(self, client: httpx.AsyncClient, api_key: str = "demo"):
        super().__init__(client)
        self._api_key = api_key

    async def _fetch(self, symbol: str) -> tuple[Decimal, Optional[Decimal]]:
        data = await self._get_json(
            f"{BASE_URL}/quote",
            params={"symbol": symbol, "token": self._api_key},
        )
        if not isinstance(data, dict):
            raise ProviderError(self.name, "unexpected response shape")
        price = parse_price(self.name, data.get("c"))
        return price, parse_change_percent(data.get("dp"))


class FinnhubSymbolSource:
    """Lists the symbols traded on an exchange."""

    def __init__(self, client: httpx.AsyncClient, api_key: str = "demo"):
        self._client = client
        self._api_key = api_key

    async def list_symbols(self, exchange: str) -> list[dict]:
        """Return raw symbol records ({symbol, displaySymbol, ...}) for an exchange."""
        try:
            response = await self._client.get(
                f"{BASE_URL}/stock/symbol",
                params={"exchange": exchange, "token": self._api_key},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError("finnhub", f"symbol listing failed: {e}")
        if not isinstance(data, list):
            raise ProviderError("finnhub", "symbol listing is not a list")
        return data
