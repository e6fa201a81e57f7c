"""
Application configuration using pydantic-settings.

Loads configuration from environment variables with sensible defaults.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # PDF uploads
    max_upload_size_mb: int = 20

    # Forecasting limits
    max_forecast_periods: int = 1000
    monte_carlo_max_iterations: int = 100_000

    # HTTP
    rate_limit_enabled: bool = True
    cors_origins: List[str] = [
        "https://localhost:3000",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Error tracking
    environment: str = "development"
    sentry_dsn: Optional[str] = None
    sentry_traces_sample_rate: float = 0.1

    @property
    def max_upload_size_bytes(self) -> int:
        """Get maximum upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
