"""
Tests for the catalog API read endpoints.

Tests validate:
- GET /api route description
- GET /api/mod-list ordering and serialization
- GET /api/mod/{name} detail, 404 and 500 responses
- GET /health
- CORS headers
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fakes import FakeFetcher
from modcat.core.catalog.api import create_app
from modcat.core.catalog.db.connection import CatalogStore
from modcat.core.catalog.sync.orchestrator import SyncOrchestrator
from modcat.core.config.models import CatalogSettings


def _client(settings: CatalogSettings, store: CatalogStore) -> TestClient:
    orchestrator = SyncOrchestrator(store, FakeFetcher(), sync_token=settings.sync_token)
    app = create_app(settings, store=store, orchestrator=orchestrator)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def client(settings: CatalogSettings, seeded_store: CatalogStore) -> TestClient:
    return _client(settings, seeded_store)


@pytest.fixture
def broken_client(settings: CatalogSettings, tmp_path: Path) -> TestClient:
    """Client whose store has no tables."""
    return _client(settings, CatalogStore(tmp_path / "broken.db"))


class TestRootEndpoints:
    """Tests for root and health check endpoints."""

    def test_homepage_describes_routes(self, client: TestClient) -> None:
        response = client.get("/api")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "GET /api/mod-list" in response.text
        assert "GET /api/mod/{name}" in response.text

    def test_health_endpoint(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestModList:
    """Tests for GET /api/mod-list."""

    def test_mod_list(self, client: TestClient) -> None:
        response = client.get("/api/mod-list")

        assert response.status_code == 200
        assert response.json() == [
            {
                "name": "Carry On",
                "author": "copygirl",
                "icon_src": None,
                "short_desc": "Carry chests",
            },
            {
                "name": "Primitive Survival",
                "author": "Spear and Fang",
                "icon_src": "https://cdn.example/ps.png",
                "short_desc": "Traps",
            },
        ]

    def test_empty_catalog(self, settings: CatalogSettings, store: CatalogStore) -> None:
        response = _client(settings, store).get("/api/mod-list")
        assert response.status_code == 200
        assert response.json() == []

    def test_store_failure(self, broken_client: TestClient) -> None:
        response = broken_client.get("/api/mod-list")

        assert response.status_code == 500
        data = response.json()
        assert data["error_code"] == "DATABASE_ERROR"
        assert data["message"] == "Catalog unavailable"
        assert "no such table" not in response.text


class TestModDetail:
    """Tests for GET /api/mod/{name}."""

    def test_mod_detail(self, client: TestClient) -> None:
        response = client.get("/api/mod/Primitive Survival")

        assert response.status_code == 200
        assert response.json() == {
            "mod_info": {
                "name": "Primitive Survival",
                "author": "Spear and Fang",
                "icon_src": "https://cdn.example/ps.png",
                "long_desc": "Long PS",
            },
            "versions": [
                {
                    "link": "https://dl.example/ps-1.1.zip",
                    "version": "1.1",
                    "changelog": "Fixes",
                },
                {
                    "link": "https://dl.example/ps-1.0.zip",
                    "version": "1.0",
                    "changelog": "First",
                },
            ],
        }

    def test_url_encoded_name(self, client: TestClient) -> None:
        response = client.get("/api/mod/Carry%20On")
        assert response.status_code == 200
        assert response.json()["mod_info"]["name"] == "Carry On"

    def test_mod_without_versions(self, client: TestClient) -> None:
        response = client.get("/api/mod/Lonely Mod")
        assert response.status_code == 200
        assert response.json()["versions"] == []

    def test_not_found(self, client: TestClient) -> None:
        response = client.get("/api/mod/Nope")

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "NOT_FOUND"
        assert data["message"] == "Mod not found: Nope"
        assert data["request_id"]

    def test_store_failure(self, broken_client: TestClient) -> None:
        response = broken_client.get("/api/mod/Carry On")
        assert response.status_code == 500
        assert response.json()["error_code"] == "DATABASE_ERROR"

    def test_unknown_route(self, client: TestClient) -> None:
        response = client.get("/api/unknown")
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"


class TestCors:
    """Tests for the CORS policy."""

    def test_any_origin_by_default(self, client: TestClient) -> None:
        response = client.get("/api/mod-list", headers={"Origin": "https://mods.example"})
        assert response.headers["access-control-allow-origin"] == "*"

    def test_preflight(self, client: TestClient) -> None:
        response = client.options(
            "/api/mod-list",
            headers={
                "Origin": "https://mods.example",
                "Access-Control-Request-Method": "GET",
            },
        )
        assert response.status_code == 200
        assert "GET" in response.headers["access-control-allow-methods"]

    def test_configured_origins(self, settings: CatalogSettings, store: CatalogStore) -> None:
        restricted = settings.model_copy(update={"cors_origins": ["https://mods.example"]})
        client = _client(restricted, store)

        allowed = client.get("/api/mod-list", headers={"Origin": "https://mods.example"})
        denied = client.get("/api/mod-list", headers={"Origin": "https://evil.example"})

        assert allowed.headers["access-control-allow-origin"] == "https://mods.example"
        assert "access-control-allow-origin" not in denied.headers
