"""Enumerations for domain models."""

from enum import Enum


class Side(str, Enum):
    """Direction of a position."""

    BUY = "BUY"
    SELL = "SELL"


class QuoteStatus(str, Enum):
    """Per-position quote status in a valuation snapshot."""

    OK = "ok"
    ERROR = "error"
    PENDING = "pending"


class LoopState(str, Enum):
    """States of the live valuation loop."""

    IDLE = "idle"
    LOADING = "loading"
    RENDERING = "rendering"
