"""
GhostMatch — Application Configuration

Loads all configuration from environment variables (and an optional .env file)
using Pydantic Settings.  A cached ``get_settings()`` helper is provided so that
FastAPI dependency-injection (and any other call-site) always receives the same
validated instance without re-parsing the environment on every request.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_BACKENDS = ("memory", "file", "redis", "gcs")


class Settings(BaseSettings):
    """Central configuration for the GhostMatch store and API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Bundle storage
    # ------------------------------------------------------------------ #
    STORAGE_BACKEND: str = "file"
    STORAGE_PATH: str = "data/ghostmatch"
    BUNDLE_KEY: str = "oh_bundle"
    SAVE_RETRY_ATTEMPTS: int = 3

    # ------------------------------------------------------------------ #
    # Redis
    # ------------------------------------------------------------------ #
    REDIS_URL: str = "redis://localhost:6379/0"

    # ------------------------------------------------------------------ #
    # Google Cloud Storage
    # ------------------------------------------------------------------ #
    GCP_PROJECT_ID: str = ""
    GCS_BUCKET_NAME: str = ""

    # ------------------------------------------------------------------ #
    # Security
    # ------------------------------------------------------------------ #
    BUNDLE_ENCRYPTION_KEY: str = ""  # Fernet key; empty stores plain JSON

    # ------------------------------------------------------------------ #
    # Profile catalog
    # ------------------------------------------------------------------ #
    CATALOG_PATH: str = ""  # empty uses the bundled demo catalog

    # ------------------------------------------------------------------ #
    # Runtime environment
    # ------------------------------------------------------------------ #
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ------------------------------------------------------------------ #
    # CORS
    # ------------------------------------------------------------------ #
    ALLOWED_ORIGINS: str = "*"

    # ------------------------------------------------------------------ #
    # Derived helpers
    # ------------------------------------------------------------------ #
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list split on commas."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def _backend_must_be_known(cls, v: str) -> str:
        v = v.lower()
        if v not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got {v!r}"
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _log_level_must_be_known(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown LOG_LEVEL {v!r}")
        return v

    @field_validator("SAVE_RETRY_ATTEMPTS")
    @classmethod
    def _attempts_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"SAVE_RETRY_ATTEMPTS must be at least 1, got {v}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, validated ``Settings`` instance.

    Import this function anywhere you need access to configuration::

        from ghostmatch.config import get_settings
        settings = get_settings()
    """
    return Settings()
