"""
Configuration for the catalogue data-access core.

All configuration is done via environment variables prefixed with
CATALOGUE_ (e.g. CATALOGUE_DATABASE_PATH, CATALOGUE_POOL_SIZE).

Invariants:
    - All settings have sensible defaults for local development
    - Invalid values fail at load time, not at first use

How to change safely:
    - Add new settings with defaults that keep existing deployments working
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Catalogue configuration."""

    # Storage
    database_path: str = Field(default="./data/catalogue.db")
    wal_mode: bool = Field(default=True)
    busy_timeout_ms: int = Field(default=5000, ge=0)

    # Connection pool
    pool_size: int = Field(default=5, ge=1)
    pool_timeout_seconds: float = Field(
        default=5.0, ge=0, description="Wait for a free connection before giving up"
    )

    # Listing
    default_page_size: int = Field(default=100, ge=0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="json")

    model_config = {"env_prefix": "CATALOGUE_"}

    def log_config(self) -> None:
        """Log the loaded configuration."""
        logger.info(
            "Catalogue configuration loaded",
            extra={
                "database_path": self.database_path,
                "pool_size": self.pool_size,
                "pool_timeout_seconds": self.pool_timeout_seconds,
                "wal_mode": self.wal_mode,
                "log_level": self.log_level,
            },
        )
