"""Application settings.

Values come from ``RPOS_``-prefixed environment variables or a ``.env``
file in the working directory, e.g. ``RPOS_DATABASE_URL``.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_LOG_FORMATS = {"text", "json"}


class Settings(BaseSettings):
    """Application settings loaded from the environment and .env"""

    model_config = SettingsConfigDict(
        env_prefix="RPOS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Database ===
    DATABASE_URL: str = "sqlite:///data/rpos.db"
    SQL_ECHO: bool = False

    # === Logging ===
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"

    # === Business Rules ===
    CURRENCY: str = "USD"
    LOW_STOCK_DEFAULT_THRESHOLD: Decimal = Decimal("10")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")
        return level

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.lower()
        if fmt not in _LOG_FORMATS:
            raise ValueError(f"LOG_FORMAT must be one of {sorted(_LOG_FORMATS)}")
        return fmt


@lru_cache
def get_settings() -> Settings:
    return Settings()
