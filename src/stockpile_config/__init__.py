"""Stockpile configuration.

Settings come from the environment and an optional .env file; see
``stockpile_config.settings`` for the discovery order.
"""

from stockpile_config.settings import (
    Settings,
    clear_settings_cache,
    get_config_dir,
    get_settings,
)

__all__ = [
    "Settings",
    "clear_settings_cache",
    "get_config_dir",
    "get_settings",
]
