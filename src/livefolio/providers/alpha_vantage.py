"""Alpha Vantage GLOBAL_QUOTE provider."""

from decimal import Decimal
from typing import Optional

import httpx

from livefolio.core.exceptions import ProviderError
from livefolio.providers.quote_provider import (
    HttpQuoteProvider,
    parse_change_percent,
    parse_price,
)

QUERY_URL = "https://www.alphavantage.co/query"


class AlphaVantageProvider(HttpQuoteProvider):
    """Alpha Vantage; rate-limited responses carry a "Note" instead of a quote."""

    name = "alpha_vantage"

    def __init__(self, client: httpx.AsyncClient, api_key: str = "demo"):
        super().__init__(client)
        self._api_key = api_key

    async def _fetch(self, symbol: str) -> tuple[Decimal, Optional[Decimal]]:
        data = await self._get_json(
            QUERY_URL,
            params={"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self._api_key},
        )
        quote = data.get("Global Quote") if isinstance(data, dict) else None
        if not quote:
            note = data.get("Note") or data.get("Information") if isinstance(data, dict) else None
            raise ProviderError(self.name, note or "no Global Quote in response")
        price = parse_price(self.name, quote.get("05. price"))
        return price, parse_change_percent(quote.get("10. change percent"))
