"""
Configuration management for the Fleet Vitality engine.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for scoring and server settings.
"""

from fleet_vitality.config.settings import (  # noqa: F401
    DEFAULT_SETTINGS,
    Settings,
    get_settings,
    reset_settings_cache,
)

__all__ = ["DEFAULT_SETTINGS", "Settings", "get_settings", "reset_settings_cache"]
