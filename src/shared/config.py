"""Application configuration, read from ``STOREFRONT_*`` environment variables or ``.env``.

Components receive a ``Config`` instance explicitly; ``get_config()`` is only
used at the application edge to build the default one.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )

    environment: str = "development"
    # Base URL of the Bot API; the token and method are appended per request
    telegram_api_base: str = "https://api.telegram.org"
    # Seconds allowed for a single channel send before it counts as failed
    notification_timeout: float = 10.0
    # When False, a discount larger than the order value yields a total of 0
    allow_negative_total: bool = False
    currency_label: str = "LYD"

    @field_validator("telegram_api_base", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str:
        return (v or "").strip().rstrip("/")

    @field_validator("notification_timeout")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("notification_timeout must be positive")
        return v


@lru_cache
def get_config() -> Config:
    return Config()
