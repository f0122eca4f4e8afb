"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from nova.configs.base import BaseSettings
from nova.configs.ingestion import IngestionSettings
from nova.configs.model import ModelSettings
from nova.configs.session import SessionSettings
from nova.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    model: ModelSettings = ModelSettings()
    vector_store: VectorStoreSettings = VectorStoreSettings()
    ingestion: IngestionSettings = IngestionSettings()
    session: SessionSettings = SessionSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from nova.configs import get_settings
        settings = get_settings()
    """
    return Settings()
