"""Configuration for the storefront SDK."""
from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

DEFAULT_STORAGE_PATH = Path.home() / ".storefront" / "storage.json"


class StorefrontSettings(BaseSettings):
    """Client settings with environment variable support (``STOREFRONT_*``)."""

    model_config = ConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )

    # API
    api_base_url: str = "https://localhost:7200/api/v1"
    timeout: float = 30.0
    verify_tls: bool = True

    # Checkout
    shipping_surcharge: Decimal = Decimal("5.99")

    # Search-as-you-type
    suggestion_debounce_seconds: float = 0.3

    # Durable local storage (credential + cart)
    storage_path: Path = DEFAULT_STORAGE_PATH


@lru_cache
def get_settings() -> StorefrontSettings:
    return StorefrontSettings()
