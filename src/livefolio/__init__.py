"""livefolio - live valuation of brokerage export positions."""

__version__ = "0.1.0"
