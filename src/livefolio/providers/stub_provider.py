"""Stub quote provider for offline/testing use."""

import random
from decimal import Decimal

from livefolio.domain.views import QuoteResult, QuoteSuccess


# Base prices for common German listings; anything else starts at 100
_STUB_BASE_PRICES: dict[str, Decimal] = {
    "SAP": Decimal("250"),
    "IFX": Decimal("33"),
    "CBK": Decimal("32"),
    "DTE": Decimal("31"),
}
_DEFAULT_BASE_PRICE = Decimal("100")


class StubQuoteProvider:
    """
    Stub provider with deterministic fake prices for offline operation.

    Always succeeds, so when enabled it must be the last provider in a chain.
    """

    name = "stub"

    def __init__(self, seed: int = 42, max_variation: float = 0.05):
        """Initialize with optional random seed for reproducibility."""
        self._rng = random.Random(seed)
        self._max_variation = max_variation

    async def attempt(self, symbol: str) -> QuoteResult:
        base = _DEFAULT_BASE_PRICE
        upper = symbol.upper()
        for prefix, price in _STUB_BASE_PRICES.items():
            if prefix in upper:
                base = price
                break
        variation = Decimal(str((self._rng.random() - 0.5) * 2 * self._max_variation))
        price = (base * (1 + variation)).quantize(Decimal("0.01"))
        return QuoteSuccess(price=price, provider_name=self.name)
