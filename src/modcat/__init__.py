"""
Modcat - Mod catalog service

Serves a catalog of mods and their version histories from a local SQLite
replica that is refreshed wholesale from a remote libsql database.
"""

__version__ = "0.3.0"

from modcat.core.config.models import CatalogSettings

__all__ = ["CatalogSettings", "__version__"]
