"""
Pytest configuration and shared fixtures.

Provides fixtures for an isolated settings environment, a temporary local
catalog (empty or seeded with sample rows), a fake remote fetcher and an
orchestrator wired to both.
"""

from pathlib import Path

import pytest

from fakes import SYNC_TOKEN, FakeFetcher, seed
from modcat.core.catalog.db.connection import CatalogStore
from modcat.core.catalog.errors import RemoteConnectionError
from modcat.core.catalog.sync.orchestrator import SyncOrchestrator
from modcat.core.config.loader import clear_cache
from modcat.core.config.models import CatalogSettings

# ==============================================================================
# Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep tests independent of the caller's environment and settings cache."""
    for var in (
        "DB_URL",
        "AUTH",
        "SYNC_AUTH",
        "MODCAT_DB_PATH",
        "MODCAT_HOST",
        "MODCAT_PORT",
        "MODCAT_CORS_ORIGINS",
        "MODCAT_SYNC_INTERVAL",
        "MODCAT_ENV_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "mods.db"


@pytest.fixture
def store(db_path: Path) -> CatalogStore:
    """Initialized, empty local catalog."""
    catalog = CatalogStore(db_path)
    catalog.initialize()
    return catalog


@pytest.fixture
def seeded_store(store: CatalogStore) -> CatalogStore:
    """Local catalog holding SAMPLE_MODS and SAMPLE_VERSIONS."""
    seed(store)
    return store


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def orchestrator(store: CatalogStore, fetcher: FakeFetcher) -> SyncOrchestrator:
    return SyncOrchestrator(store, fetcher, sync_token=SYNC_TOKEN)


@pytest.fixture
def settings(db_path: Path) -> CatalogSettings:
    return CatalogSettings(
        remote_url="libsql://mods.example.io",
        remote_auth_token="remote-token",
        sync_token=SYNC_TOKEN,
        db_path=db_path,
    )


@pytest.fixture
def unreachable() -> FakeFetcher:
    """Fetcher whose remote cannot be reached."""
    return FakeFetcher(
        error=RemoteConnectionError("Failed to reach remote database: connection refused")
    )
