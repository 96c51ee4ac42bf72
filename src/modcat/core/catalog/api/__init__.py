"""
FastAPI application for the mod catalog.

API Endpoints:
- GET /api - Route description (plain text)
- GET /api/mod-list - All mods with at least one version
- GET /api/mod/{name} - One mod with its versions
- GET /api/run-sync/{token} - Refresh the local replica from the remote
- GET /health - Health check

Usage:
    from modcat.core.catalog.api import create_app

    app = create_app(load_settings())
"""

from modcat.core.catalog.api.app import create_app

__all__ = ["create_app"]
