"""Configuration for the Statecraft services."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from the environment or ``.env``."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str = Field(default="sqlite:///statecraft.db", description="SQLAlchemy URL")
    DATABASE_ECHO: bool = Field(default=False, description="Log emitted SQL")
    DATABASE_POOL_SIZE: int = Field(default=5, ge=1)
    DATABASE_MAX_OVERFLOW: int = Field(default=10, ge=0)
    DATABASE_POOL_RECYCLE: int = Field(default=3600, description="Seconds before reconnecting")
    DATABASE_POOL_TIMEOUT: int = Field(default=30, ge=1)

    sweep_interval_seconds: float = Field(
        default=5.0,
        description="Real-time seconds between scheduler sweeps",
        gt=0.0,
    )
    resolving_timeout_seconds: float = Field(
        default=600.0,
        description="Age after which a quarter stuck in 'resolving' may be reclaimed",
        gt=0.0,
    )
    job_max_attempts: int = Field(
        default=3, description="Attempts before a resolution job is marked failed", ge=1
    )
    default_quarter_duration_seconds: int = Field(default=300, gt=0)
    default_total_quarters: int = Field(default=40, gt=0)
    default_max_players: int = Field(default=10, ge=1)
    min_players_to_start: int = Field(default=2, ge=1)


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
