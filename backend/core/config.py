"""
Centralized configuration for the market price backend.

All environment variables and settings should be defined here
to avoid duplication across modules.
"""
import os
from functools import lru_cache


class Settings:
    """Application settings loaded from environment variables."""

    # CORS - comma-separated list of allowed origins
    ALLOWED_ORIGINS: list = os.environ.get(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000"
    ).split(",")

    # Price dataset (JSON or XLSX) and engine config (empty = bundled market_config.json)
    DATASET_PATH: str = os.environ.get("PRICE_DATASET_PATH", "data/crop_price.json")
    MARKET_CONFIG_PATH: str = os.environ.get("PRICE_MARKET_CONFIG", "")

    # Minutes between dataset change checks (0 disables the periodic check)
    REFRESH_MINUTES: int = int(os.environ.get("PRICE_REFRESH_MINUTES", "15"))

    # API key for protecting the reload endpoint (optional)
    API_KEY: str = os.environ.get("PRICE_API_KEY", "")
    API_KEY_HEADER: str = os.environ.get("PRICE_API_KEY_HEADER", "X-API-Key")

    # data.gov.in sync
    DATAGOV_API_KEY: str = os.environ.get("DATAGOV_API_KEY", "")
    DATAGOV_RESOURCE_ID: str = os.environ.get(
        "DATAGOV_RESOURCE_ID", "9ef84268-d588-465a-a308-a864a43d0070"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
