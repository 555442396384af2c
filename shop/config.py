"""Application settings loaded from the environment.

Every field can be overridden with a ``SHOP_``-prefixed environment variable
(e.g. ``SHOP_LOG_LEVEL=DEBUG``) or from a local ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SHOP_",
        env_file=".env",
        extra="ignore",
    )

    app_title: str = Field(default="Shop Domain Events Service")
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON instead of the coloured console format",
    )
    register_default_handlers: bool = Field(
        default=True,
        description="Attach the built-in console/email handlers at startup",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache
def get_settings() -> Settings:
    return Settings()
