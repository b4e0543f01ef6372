"""Application settings and configuration."""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_QUOTE_PROVIDERS = [
    "yahoo",
    "yahoo_proxy",
    "finnhub",
    "alpha_vantage",
    "binance",
    "yahoo_fallback",
    "yfinance",
]


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.home() / ".livefolio"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LIVEFOLIO_",
        extra="ignore",
    )

    app_name: str = "livefolio"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Data directory (sqlite cache lives here)
    data_dir: Optional[Path] = None

    # Database URL (derived from data_dir if not set explicitly)
    database_url: Optional[str] = None

    # Quote cache
    cache_backend: Literal["memory", "sqlite"] = "memory"
    quote_cache_ttl_seconds: int = 180
    cache_version: str = "fx_v1"

    # Live valuation loop
    refresh_interval_seconds: float = 30.0
    refresh_on_start: bool = True
    batch_concurrency: int = 8
    batch_pacing_seconds: float = 0.12

    # Providers, tried in this order
    quote_providers: list[str] = DEFAULT_QUOTE_PROVIDERS
    provider_timeout_seconds: float = 10.0
    enable_stub_quotes: bool = False
    finnhub_api_key: str = "demo"
    alpha_vantage_api_key: str = "demo"

    # Brokerage export
    positions_csv: Optional[Path] = None
    closed_trades_csv: Optional[Path] = None
    export_timezone: str = "Europe/Warsaw"

    # Top movers
    movers_exchange: str = "XETRA"
    movers_symbol_suffix: str = ".DE"
    movers_top_n: int = 50

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "cache.db"
        return f"sqlite:///{db_path}"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
