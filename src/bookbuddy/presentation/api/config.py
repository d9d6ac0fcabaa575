"""API configuration adapter.

Bridges the centralized bookbuddy_config settings with the API layer.
"""

from bookbuddy_config.settings import Settings, get_settings


def get_api_settings() -> Settings:
    """Get settings from centralized configuration.

    Not cached here; ``get_settings`` already is, and tests reset it with
    ``clear_settings_cache``.
    """
    return get_settings()
