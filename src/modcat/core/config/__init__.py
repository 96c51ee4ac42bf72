"""
Configuration for modcat.

Settings come from environment variables, optionally seeded from layered
.env files, and are validated into a frozen CatalogSettings model.
"""

from .env import load_layered_env
from .loader import clear_cache, load_settings
from .models import CatalogSettings, ConfigError

__all__ = [
    "CatalogSettings",
    "ConfigError",
    "clear_cache",
    "load_layered_env",
    "load_settings",
]
