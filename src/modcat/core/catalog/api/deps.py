"""FastAPI dependencies resolving the objects owned by the app."""

from fastapi import Request

from modcat.core.catalog.db.connection import CatalogStore
from modcat.core.catalog.sync.orchestrator import SyncOrchestrator


def get_store(request: Request) -> CatalogStore:
    """Return the CatalogStore the app was created with."""
    store: CatalogStore = request.app.state.store
    return store


def get_orchestrator(request: Request) -> SyncOrchestrator:
    """Return the SyncOrchestrator the app was created with."""
    orchestrator: SyncOrchestrator = request.app.state.orchestrator
    return orchestrator
