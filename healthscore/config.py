"""
HealthScore Configuration Module
================================

Centralized configuration management using Pydantic Settings.

Loads configuration from:
    1. Environment variables (prefixed with HEALTHSCORE_)
    2. .env file (if present)
    3. Default values

Scoring semantics never come from here: weights, caps and thresholds
live in the per-macroarea rule bundles. Settings only cover where the
bundles are found and how the process logs.

Usage:
    from healthscore.config import settings

    print(settings.configs_root)

Author: HealthScore Team
Version: 1.0.0
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Naming convention: HEALTHSCORE_UPPER_SNAKE_CASE in env,
    lower_snake_case in code.
    """

    model_config = SettingsConfigDict(
        env_prefix="HEALTHSCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application Settings
    # =========================================================================

    app_name: str = Field(default="healthscore", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=True, description="Render logs as JSON")

    # =========================================================================
    # Rule Bundles
    # =========================================================================

    configs_root: Path = Field(
        default=Path("configs/macroaree"),
        description="Directory holding one sub-directory per macroarea bundle",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings instance
    """
    return Settings()


# Convenience alias
settings = get_settings()
