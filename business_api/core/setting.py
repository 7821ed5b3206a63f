"""
Configuration Settings

Every setting is read from the environment (or a .env file in the working
directory) through pydantic-settings; names are case-insensitive.

Groups:
- Runtime: ENV_SETTING, LOG_LEVEL
- Storage: DATABASE_URL, DATABASE_ECHO, CREATE_SCHEMA_ON_STARTUP, SEED_ON_STARTUP
- API: MAX_BUSINESSES_PER_PAGE, RATE_LIMIT_ENABLED, CORS_ALLOW_ORIGINS
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]


class EnvSettingsOptions(Enum):
    """Deployment environment."""
    production = "production"
    staging = "staging"
    development = "dev"


class Settings(BaseSettings):
    """Business directory settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    ENV_SETTING: EnvSettingsOptions = Field(
        default=EnvSettingsOptions.development,
        description="Deployment environment (production, staging, dev)"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root logging level (DEBUG, INFO, WARNING, ...)"
    )

    # Any SQLAlchemy async URL with a matching adapter in db/sqlite_adapter.py
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./businesses.db",
        description="Database connection string"
    )
    DATABASE_ECHO: bool = Field(
        default=False,
        description="Log every SQL statement (debugging only)"
    )
    CREATE_SCHEMA_ON_STARTUP: bool = Field(
        default=True,
        description="Create missing tables on startup (Alembic remains the source of truth)"
    )
    SEED_ON_STARTUP: bool = Field(
        default=False,
        description="Load the sample businesses on startup when the businesses table is empty"
    )

    MAX_BUSINESSES_PER_PAGE: int = Field(
        default=25,
        gt=0,
        description="Maximum number of businesses returned by a single search"
    )
    RATE_LIMIT_ENABLED: bool = Field(
        default=True,
        description="Apply the per-IP limits from core.rate_limit"
    )
    CORS_ALLOW_ORIGINS: list[str] = Field(
        default=["*"],
        description="Origins allowed by the CORS middleware (JSON list in the environment)"
    )


settings = Settings()
