"""Centralised application configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/contextweaver/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str | None = None


class StoreConfig(BaseModel):
    """Storage backend selection.

    ``backend=None`` picks ``database`` when DATABASE__URL is set and
    ``memory`` otherwise.
    """

    backend: Literal["database", "memory"] | None = None


class AppConfig(BaseModel):
    """Application runtime configuration."""

    base_url: str = "http://localhost:8080"
    port: int = 8080
    storage_secret: SecretStr = SecretStr("dev-secret-change-me")
    log_dir: Path = Path("logs")
    max_viewer_documents: int = Field(default=3, ge=1, le=6)
    preview_chars: int = Field(default=150, ge=0)


class DevConfig(BaseModel):
    """Development and testing toggles."""

    database_echo: bool = False
    test_database_url: str | None = None
    enable_seed_data: bool = False


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Application settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``DATABASE__URL``, ``STORE__BACKEND``, ``APP__PORT``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    database: DatabaseConfig = DatabaseConfig()
    store: StoreConfig = StoreConfig()
    app: AppConfig = AppConfig()
    dev: DevConfig = DevConfig()

    @model_validator(mode="after")
    def _database_backend_needs_url(self) -> Settings:
        if self.store.backend == "database" and not self.database.url:
            msg = "STORE__BACKEND=database requires DATABASE__URL to be set"
            raise ValueError(msg)
        return self

    @property
    def store_backend(self) -> Literal["database", "memory"]:
        """The effective storage backend."""
        if self.store.backend is not None:
            return self.store.backend
        return "database" if self.database.url else "memory"


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
