"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "Crypto Charts Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Redis
    redis_url: str = "redis://localhost:6379"
    klines_cache_ttl: int = 60  # seconds

    # Exchange API
    binance_base_url: str = "https://api.binance.com/api/v3/klines"
    http_timeout: float = 10.0

    # Feature Flags
    enable_live_data: bool = False
    enable_mock_fallback: bool = True

    # Synthetic series
    default_series_length: int = 180
    max_series_length: int = 1000
    max_klines_limit: int = 1000
    volume_jitter_min: float = 0.55
    volume_jitter_max: float = 1.45

    # Indicator defaults (dashboard slider ranges)
    default_sma_window: int = 20
    min_sma_window: int = 5
    max_sma_window: int = 60
    default_ema_span: int = 12
    min_ema_span: int = 5
    max_ema_span: int = 40
    default_rsi_period: int = 14
    min_rsi_period: int = 5
    max_rsi_period: int = 40

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
