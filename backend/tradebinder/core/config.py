"""
Application configuration settings.

All configuration is loaded from environment variables with sensible defaults.
"""
import json
from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Trade Binder API"
    api_debug: bool = True

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 4000
    cors_origins: list[str] = ["http://localhost:5173"]

    # Scryfall API
    # Scryfall asks for 50-100ms between requests; 8 req/s with a burst of 8
    scryfall_base_url: str = "https://api.scryfall.com"
    scryfall_user_agent: str = "TradeBinder/1.0 (+local)"
    scryfall_rate_limit_capacity: int = 8
    scryfall_refill_per_second: float = 8.0
    external_api_timeout: float = 30.0

    # In-memory catalog cache
    cache_max_entries: int = 5000
    cache_default_ttl_seconds: float = 60 * 60
    search_cache_ttl_seconds: float = 60 * 10
    card_cache_ttl_seconds: float = 60 * 60

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        """Parse CORS origins from JSON string or list."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [v]
        return v

    @field_validator("scryfall_rate_limit_capacity")
    @classmethod
    def validate_capacity(cls, v: int) -> int:
        if v < 1:
            raise ValueError("scryfall_rate_limit_capacity must be at least 1")
        return v

    @field_validator(
        "scryfall_refill_per_second",
        "cache_default_ttl_seconds",
        "search_cache_ttl_seconds",
        "card_cache_ttl_seconds",
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
