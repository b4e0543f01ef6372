"""Quote provider protocol and shared base class."""

from decimal import Decimal, InvalidOperation
from typing import Optional, Protocol

import httpx

from livefolio.core.exceptions import ProviderError
from livefolio.domain.views import QuoteFailure, QuoteResult, QuoteSuccess


class QuoteProvider(Protocol):
    """
    Protocol for a single market-data source.

    Implementations own their symbol-format normalisation and must never
    raise for ordinary failures: they return a QuoteFailure instead.
    """

    name: str

    async def attempt(self, symbol: str) -> QuoteResult:
        """Try to price one symbol."""
        ...


def parse_price(provider: str, value: object) -> Decimal:
    """Return value as a positive finite Decimal or raise ProviderError."""
    if value is None or value == "":
        raise ProviderError(provider, "no price in response")
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ProviderError(provider, f"non-numeric price {value!r}")
    if not price.is_finite():
        raise ProviderError(provider, f"non-finite price {value!r}")
    if price <= 0:
        raise ProviderError(provider, f"non-positive price {value!r}")
    return price


def parse_change_percent(value: object) -> Optional[Decimal]:
    """Best-effort parse of a daily change percentage ("1.23%", 1.23, None)."""
    if value is None:
        return None
    text = str(value).strip().rstrip("%")
    try:
        change = Decimal(text)
    except (InvalidOperation, ValueError):
        return None
    return change if change.is_finite() else None


def change_from_previous_close(price: Decimal, previous_close: object) -> Optional[Decimal]:
    """Percentage change from a previous close, or None when unavailable."""
    try:
        prev = parse_price("previous_close", previous_close)
    except ProviderError:
        return None
    return (price - prev) / prev * 100


class BaseQuoteProvider:
    """
    Base for providers that fetch one price per call.

    Subclasses implement _fetch() and raise ProviderError for anything that
    does not yield a usable price. attempt() turns errors into QuoteFailure.
    """

    name = "base"

    async def attempt(self, symbol: str) -> QuoteResult:
        try:
            price, change = await self._fetch(symbol)
        except ProviderError as e:
            return QuoteFailure(reason=str(e))
        except httpx.HTTPStatusError as e:
            return QuoteFailure(reason=f"{self.name}: HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            return QuoteFailure(reason=f"{self.name}: {e.__class__.__name__}")
        except ValueError as e:
            # Malformed JSON bodies
            return QuoteFailure(reason=f"{self.name}: malformed payload ({e})")
        return QuoteSuccess(price=price, provider_name=self.name, change_percent=change)

    async def _fetch(self, symbol: str) -> tuple[Decimal, Optional[Decimal]]:
        raise NotImplementedError


class HttpQuoteProvider(BaseQuoteProvider):
    """Provider backed by a shared httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def _get_json(self, url: str, **kwargs) -> object:
        response = await self._client.get(url, **kwargs)
        response.raise_for_status()
        return response.json()
