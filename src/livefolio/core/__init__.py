"""Core utilities and shared functionality."""

from livefolio.core.timezone import (
    now_utc,
    to_utc,
    parse_export_datetime,
    UTC,
    EXPORT_TZ,
)
from livefolio.core.exceptions import (
    AppError,
    ValidationError,
    ProviderError,
    CacheUnavailableError,
    ConsolidationRejectedError,
)

__all__ = [
    "now_utc",
    "to_utc",
    "parse_export_datetime",
    "UTC",
    "EXPORT_TZ",
    "AppError",
    "ValidationError",
    "ProviderError",
    "CacheUnavailableError",
    "ConsolidationRejectedError",
]
