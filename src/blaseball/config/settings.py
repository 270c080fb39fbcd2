"""Application configuration schema and validation."""

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    env: Literal["dev", "staging", "prod"] = Field(
        default="dev",
        description="Application environment",
    )
    data_dir: Path = Field(
        default=Path("team-data"),
        description="Directory holding gzip-compressed snapshot dumps",
    )
    cache_dir: Path = Field(
        default=Path.home() / ".cache" / "blaseball-sim",
        description="Root directory for fingerprinted database caches",
    )
    default_sim_n: int = Field(
        default=1000,
        ge=1,
        le=100_000,
        description="Default number of Monte Carlo trials per game",
    )
    sim_workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Worker threads used to fan out Monte Carlo trials",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the logging level name."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level


_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create the singleton AppConfig instance."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def reset_config() -> None:
    """Drop the cached AppConfig so the next get_config() re-reads the environment."""
    global _config
    _config = None
