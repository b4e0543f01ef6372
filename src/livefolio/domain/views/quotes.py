"""Quote results produced by providers and the provider chain."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Union


CHAIN_EXHAUSTED = "all providers exhausted"


@dataclass(frozen=True)
class QuoteSuccess:
    """A usable price and the provider that supplied it."""

    price: Decimal
    provider_name: str
    change_percent: Optional[Decimal] = None

    ok = True

    def to_payload(self) -> dict[str, Any]:
        return {
            "status": "ok",
            "price": str(self.price),
            "provider": self.provider_name,
            "change_percent": None if self.change_percent is None else str(self.change_percent),
        }


@dataclass(frozen=True)
class QuoteFailure:
    """No usable price; reason is for diagnostics only."""

    reason: str

    ok = False

    def to_payload(self) -> dict[str, Any]:
        return {"status": "error", "reason": self.reason}


QuoteResult = Union[QuoteSuccess, QuoteFailure]


def quote_from_payload(payload: dict[str, Any]) -> QuoteResult:
    """Rebuild a QuoteResult from its cached payload form."""
    if payload.get("status") == "ok":
        change = payload.get("change_percent")
        return QuoteSuccess(
            price=Decimal(payload["price"]),
            provider_name=payload["provider"],
            change_percent=None if change is None else Decimal(change),
        )
    return QuoteFailure(reason=payload.get("reason") or "unknown")


def results_to_payload(results: dict[str, QuoteResult]) -> dict[str, dict[str, Any]]:
    """Serialize a batch result map (symbol -> result) for caching."""
    return {symbol: result.to_payload() for symbol, result in results.items()}


def results_from_payload(payload: dict[str, dict[str, Any]]) -> dict[str, QuoteResult]:
    """Inverse of results_to_payload."""
    return {symbol: quote_from_payload(item) for symbol, item in payload.items()}
