"""Ordered fallback over quote providers."""

import logging
from typing import Protocol, Sequence

from livefolio.domain.views import CHAIN_EXHAUSTED, QuoteFailure, QuoteResult, QuoteSuccess
from livefolio.providers.quote_provider import QuoteProvider

logger = logging.getLogger(__name__)


class QuoteResolver(Protocol):
    """Anything that turns one symbol into a QuoteResult without raising."""

    async def resolve(self, symbol: str) -> QuoteResult:
        ...


class QuoteProviderChain:
    """
    Tries providers strictly in priority order for one symbol.

    The first success wins and later providers are not called. A provider
    failure is logged and the chain moves on; there are no per-provider
    retries. Running out of providers is a normal outcome, not an error.
    """

    def __init__(self, providers: Sequence[QuoteProvider]):
        self._providers = list(providers)

    @property
    def provider_names(self) -> list[str]:
        return [p.name for p in self._providers]

    async def resolve(self, symbol: str) -> QuoteResult:
        for index, provider in enumerate(self._providers, start=1):
            try:
                result = await provider.attempt(symbol)
            except Exception as e:  # noqa: BLE001 - one provider must not break the chain
                logger.warning(
                    f"Provider {provider.name} raised for {symbol}: {e.__class__.__name__}: {e}"
                )
                continue

            if isinstance(result, QuoteSuccess) and result.price.is_finite() and result.price > 0:
                logger.debug(
                    f"Priced {symbol} at {result.price} via {result.provider_name} "
                    f"(attempt {index}/{len(self._providers)})"
                )
                return result

            reason = result.reason if isinstance(result, QuoteFailure) else "unusable price"
            logger.info(f"Provider {provider.name} failed for {symbol}: {reason}")

        logger.warning(f"All providers failed for {symbol}")
        return QuoteFailure(reason=CHAIN_EXHAUSTED)
