"""
Sync layer for the mod catalog.

Pulls a full snapshot of the remote database and swaps it into the local
store.

Architecture:
- remote: RemoteFetcher reading whole tables through the libsql client
- decoder: strict row-to-entity mapping
- writer: SQLite inserts into the (shadow) catalog tables
- orchestrator: the sync state machine and the atomic swap
- scheduler: optional periodic sync on a background thread
"""

from modcat.core.catalog.sync.orchestrator import SyncOrchestrator
from modcat.core.catalog.sync.remote import RemoteFetcher, TableSnapshot
from modcat.core.catalog.sync.scheduler import SyncScheduler
from modcat.core.catalog.sync.writer import CatalogWriter

__all__ = [
    "CatalogWriter",
    "RemoteFetcher",
    "SyncOrchestrator",
    "SyncScheduler",
    "TableSnapshot",
]
