"""Builds the ordered provider list from settings."""

import logging
from typing import Callable

import httpx

from livefolio.config.settings import Settings
from livefolio.core.exceptions import ValidationError
from livefolio.providers.alpha_vantage import AlphaVantageProvider
from livefolio.providers.binance import BinanceProvider
from livefolio.providers.finnhub import FinnhubProvider
from livefolio.providers.quote_provider import QuoteProvider
from livefolio.providers.stub_provider import StubQuoteProvider
from livefolio.providers.yahoo import (
    YahooChartProvider,
    YahooProxyProvider,
    YahooSuffixFallbackProvider,
)
from livefolio.providers.yfinance_provider import YFinanceProvider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[httpx.AsyncClient, Settings], QuoteProvider]

PROVIDER_FACTORIES: dict[str, ProviderFactory] = {
    "yahoo": lambda client, settings: YahooChartProvider(client),
    "yahoo_proxy": lambda client, settings: YahooProxyProvider(client),
    "finnhub": lambda client, settings: FinnhubProvider(client, settings.finnhub_api_key),
    "alpha_vantage": lambda client, settings: AlphaVantageProvider(
        client, settings.alpha_vantage_api_key
    ),
    "binance": lambda client, settings: BinanceProvider(client),
    "yahoo_fallback": lambda client, settings: YahooSuffixFallbackProvider(client),
    "yfinance": lambda client, settings: YFinanceProvider(),
}


def build_providers(client: httpx.AsyncClient, settings: Settings) -> list[QuoteProvider]:
    """
    Instantiate providers in the configured priority order.

    The stub provider, when enabled, is always appended last.
    """
    providers: list[QuoteProvider] = []
    for name in settings.quote_providers:
        factory = PROVIDER_FACTORIES.get(name)
        if factory is None:
            raise ValidationError(f"Unknown quote provider: {name}")
        providers.append(factory(client, settings))
    if settings.enable_stub_quotes:
        providers.append(StubQuoteProvider())
    logger.info(f"Quote providers: {[p.name for p in providers]}")
    return providers
