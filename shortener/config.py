"""Configuration management for the slug shortener service.

This module provides centralized configuration management using Pydantic BaseSettings
with environment variable support and caching for performance.

Flow Diagram — get_settings()
=============================
::
    ┌─────────────┐
    │  Call get_  │
    │  settings() │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Check cache  │
    │ (lru_cache)  │
    └──────┬──────┘
    HIT?  │
    ┌─────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────┐
│ Read env│  │ Return  │
│ + .env  │  │ cached  │
│ file    │  │ value   │
└─────────┘  └─────────┘

How to Use
===========
**Step 1 — Import**::
    from shortener.config import get_settings

**Step 2 — Get settings**::
    settings = get_settings()
    uri = settings.MONGODB_URI

**Step 3 — Check the runtime mode**::
    if settings.is_production:
        ...

Key Behaviours
===============
- Settings are cached after first access for performance.
- Environment variables override defaults automatically.
- ``MONGODB_URI`` has no default; a missing value raises ValidationError.
- ``NODE_ENV`` is accepted as an alias of ``APP_ENV``.

Classes:
    Settings:  Pydantic model for all configuration values.

"""

__all__ = ["Settings", "get_settings"]

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shortener.enums import AppEnv


class Settings(BaseSettings):
    APP_NAME: str = "slug-shortener"
    APP_ENV: str = Field(
        default=AppEnv.DEVELOPMENT.value,
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV"),
    )
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    # MongoDB
    MONGODB_URI: str
    MONGODB_DATABASE: str = "url_shortener"
    MONGODB_COLLECTION: str = "urls"
    MONGODB_TIMEOUT_MS: int = 5000

    # Slug config
    SLUG_LENGTH: int = Field(default=5, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.strip().lower() == AppEnv.PRODUCTION


@lru_cache()
def get_settings() -> Settings:
    return Settings()
