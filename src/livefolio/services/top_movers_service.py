"""Top gainers and losers for an exchange."""

import logging
from decimal import Decimal
from typing import Optional, Protocol

from livefolio.core.exceptions import ProviderError
from livefolio.core.timezone import now_utc
from livefolio.domain.views import Mover, MoversView, QuoteSuccess
from livefolio.services.batch_fetcher import BoundedBatchFetcher
from livefolio.services.ttl_cache import TtlCache

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 50


class SymbolSource(Protocol):
    async def list_symbols(self, exchange: str) -> list[dict]:
        ...


class TopMoversService:
    """
    Ranks an exchange's listings by daily change percent.

    Both the symbol enumeration and the ranked result are cached, since a
    full pass makes one provider call per listed symbol.
    """

    def __init__(
        self,
        symbol_source: SymbolSource,
        fetcher: BoundedBatchFetcher,
        cache: TtlCache,
        exchange: str = "XETRA",
        symbol_suffix: str = ".DE",
    ):
        self._symbol_source = symbol_source
        self._fetcher = fetcher
        self._cache = cache
        self._exchange = exchange
        self._suffix = symbol_suffix.upper()

    async def list_exchange_symbols(self) -> list[str]:
        """Unique upper-case symbols on the exchange that carry the listing suffix."""
        key = f"symbols:{self._exchange}"
        cached = self._cache.get(key)
        if cached:
            return list(cached)

        records = await self._symbol_source.list_symbols(self._exchange)
        symbols = []
        for record in records:
            if not isinstance(record, dict):
                continue
            symbol = (record.get("displaySymbol") or record.get("symbol") or "").upper()
            if symbol.endswith(self._suffix):
                symbols.append(symbol)
        symbols = list(dict.fromkeys(symbols))

        if symbols:
            self._cache.set(key, symbols)
        return symbols

    async def build_movers(self, top_n: int = DEFAULT_TOP_N) -> MoversView:
        """Return the top_n gainers and losers; an empty view with a note when no data."""
        key = f"movers:{self._exchange}"
        cached = self._cache.get(key)
        if cached is not None:
            return self._view(cached, top_n)

        try:
            symbols = await self.list_exchange_symbols()
        except ProviderError as e:
            logger.error(f"Cannot list {self._exchange} symbols: {e}")
            return MoversView(
                exchange=self._exchange,
                as_of=now_utc(),
                note="no data (symbol listing failed)",
            )

        logger.info(f"Fetching {len(symbols)} {self._exchange} quotes for movers")
        results = await self._fetcher.fetch_all(symbols)
        movers = [
            {"symbol": symbol, "change_percent": str(result.change_percent)}
            for symbol, result in results.items()
            if isinstance(result, QuoteSuccess) and result.change_percent is not None
        ]
        payload = {
            "gainers": sorted(movers, key=lambda m: Decimal(m["change_percent"]), reverse=True),
            "losers": sorted(movers, key=lambda m: Decimal(m["change_percent"])),
        }
        if movers:
            self._cache.set(key, payload)
        return self._view(payload, top_n)

    def _view(self, payload: dict, top_n: int) -> MoversView:
        gainers = _to_movers(payload.get("gainers", []), top_n)
        losers = _to_movers(payload.get("losers", []), top_n)
        note: Optional[str] = None
        if not gainers and not losers:
            note = "no data (rate limit or market closed?)"
        return MoversView(
            exchange=self._exchange,
            gainers=gainers,
            losers=losers,
            as_of=now_utc(),
            note=note,
        )


def _to_movers(items: list[dict], top_n: int) -> tuple[Mover, ...]:
    return tuple(
        Mover(symbol=item["symbol"], change_percent=Decimal(item["change_percent"]))
        for item in items[:top_n]
    )
