"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class ProviderError(AppError):
    """Raised by a quote provider when it cannot produce a usable price.

    Always recoverable: the provider chain moves on to the next provider.
    """

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}", code="PROVIDER_ERROR")


class CacheUnavailableError(AppError):
    """Raised by a cache store when the backing storage fails."""

    def __init__(self, operation: str, detail: str):
        super().__init__(f"Cache {operation} failed: {detail}", code="CACHE_UNAVAILABLE")


class ConsolidationRejectedError(AppError):
    """A consolidated group failed its invariant checks and was dropped."""

    def __init__(self, symbol: str, side: str, reason: str):
        self.symbol = symbol
        self.side = side
        self.reason = reason
        super().__init__(
            f"Rejected position {symbol or '<blank>'}/{side}: {reason}",
            code="CONSOLIDATION_REJECTED",
        )
