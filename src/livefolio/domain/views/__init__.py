"""View models for valuation, quotes, movers and closed trades."""

from livefolio.domain.views.quotes import (
    CHAIN_EXHAUSTED,
    QuoteSuccess,
    QuoteFailure,
    QuoteResult,
    quote_from_payload,
    results_to_payload,
    results_from_payload,
)
from livefolio.domain.views.valuation import (
    PositionValuation,
    PortfolioTotals,
    PortfolioValuation,
)
from livefolio.domain.views.movers import Mover, MoversView
from livefolio.domain.views.closed_trades import MonthlySummary

__all__ = [
    "CHAIN_EXHAUSTED",
    "QuoteSuccess",
    "QuoteFailure",
    "QuoteResult",
    "quote_from_payload",
    "results_to_payload",
    "results_from_payload",
    "PositionValuation",
    "PortfolioTotals",
    "PortfolioValuation",
    "Mover",
    "MoversView",
    "MonthlySummary",
]
