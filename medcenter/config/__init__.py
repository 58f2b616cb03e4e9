"""Configuration loading for MedCenter.

Usage:
    from medcenter.config import get_settings

    settings = get_settings()
    capacity = settings.action_log.queue_capacity
"""

from functools import lru_cache

from medcenter.config.loader import load_config
from medcenter.config.settings import Settings, set_toml_config
from medcenter.observability.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings instance.

    Falls back to code defaults (plus environment variables) when no
    config/default.toml can be found. Call ``get_settings.cache_clear()``
    to reload.
    """
    try:
        set_toml_config(load_config())
    except FileNotFoundError as e:
        logger.warning("config_file_not_found", error=str(e))
        set_toml_config({})

    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]
