"""
Database layer for the mod catalog.

Provides the SQLite schema, the shared local store handle and the read
queries served by the API.

Main components:
- schema.py: table DDL, idempotent creation, shadow table naming
- lock.py: reader/writer lock coordinating queries and the sync swap
- connection.py: CatalogStore handle and statement helpers
- queries.py: list_mods / get_mod

Usage:
    from modcat.core.catalog.db import CatalogStore, get_mod, list_mods

    store = CatalogStore(Path("mods.db"))
    store.initialize()
    mods = list_mods(store)
"""

from modcat.core.catalog.db.connection import CatalogStore, execute, query
from modcat.core.catalog.db.lock import ReadWriteLock
from modcat.core.catalog.db.queries import get_mod, list_mods
from modcat.core.catalog.db.schema import ensure_schema

__all__ = [
    "CatalogStore",
    "ReadWriteLock",
    "ensure_schema",
    "execute",
    "get_mod",
    "list_mods",
    "query",
]
