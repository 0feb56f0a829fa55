"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from session_manager.configs.base import BaseSettings
from session_manager.configs.nosql import NoSQLSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    nosql: NoSQLSettings = Field(default_factory=NoSQLSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from session_manager.configs import get_settings
        settings = get_settings()
    """
    return Settings()
