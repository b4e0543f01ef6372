"""Market data providers module."""

from livefolio.providers.quote_provider import QuoteProvider, BaseQuoteProvider, HttpQuoteProvider
from livefolio.providers.yahoo import (
    YahooChartProvider,
    YahooProxyProvider,
    YahooSuffixFallbackProvider,
)
from livefolio.providers.finnhub import FinnhubProvider, FinnhubSymbolSource
from livefolio.providers.alpha_vantage import AlphaVantageProvider
from livefolio.providers.binance import BinanceProvider
from livefolio.providers.yfinance_provider import YFinanceProvider
from livefolio.providers.stub_provider import StubQuoteProvider
from livefolio.providers.registry import build_providers

__all__ = [
    "QuoteProvider",
    "BaseQuoteProvider",
    "HttpQuoteProvider",
    "YahooChartProvider",
    "YahooProxyProvider",
    "YahooSuffixFallbackProvider",
    "FinnhubProvider",
    "FinnhubSymbolSource",
    "AlphaVantageProvider",
    "BinanceProvider",
    "YFinanceProvider",
    "StubQuoteProvider",
    "build_providers",
]
