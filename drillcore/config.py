"""
Configuration settings for drillcore.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DRILLCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".drillcore",
        description="Directory holding the local state database",
    )
    db_filename: str = Field(
        default="state.db",
        description="SQLite file name inside data_dir",
    )
    namespace: str = Field(
        default="course",
        description="Storage prefix of the course instance (e.g. 'go-course')",
    )

    # ========================================
    # Course metadata
    # ========================================
    catalog_path: Path | None = Field(
        default=None,
        description="JSON file with module names, concept index and items",
    )

    # ========================================
    # Sessions & logging
    # ========================================
    session_size: int = Field(
        default=10,
        ge=1,
        description="Default number of items in a practice session",
    )
    log_level: str = Field(
        default="WARNING",
        description="Minimum level for the stderr log sink",
    )

    @property
    def db_path(self) -> Path:
        """Full path of the SQLite state database."""
        return self.data_dir / self.db_filename


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Route loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or get_settings().log_level).upper(),
        format="<level>{message}</level>",
    )
