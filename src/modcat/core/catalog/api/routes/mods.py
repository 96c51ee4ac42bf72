"""
Catalog API routes.

Provides the read endpoints:
- GET /api - Plain text description of the routes
- GET /api/mod-list - Summaries of all mods, most recently released first
- GET /api/mod/{name} - One mod with its version history

Handlers are plain functions, so FastAPI runs them in its threadpool
where they may block on the store's read lock.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from modcat.core.catalog.api.deps import get_store
from modcat.core.catalog.db.connection import CatalogStore
from modcat.core.catalog.db.queries import get_mod, list_mods
from modcat.core.catalog.models import ModEntry, ModListEntry

router = APIRouter()

ROUTES_DESCRIPTION = """
    Routes:
        - GET /api/mod-list - returns a JSON list of all mods sorted by 'recently updated' or HTTP 500
        - GET /api/mod/{name} - returns a JSON object representing info about the mod with the specified name or HTTP 500 if some component fails, or HTTP 404 if the mod doesn't exist
    """


@router.get("", response_class=PlainTextResponse)
def homepage() -> str:
    """Describe the available routes."""
    return ROUTES_DESCRIPTION


@router.get("/mod-list", response_model=list[ModListEntry])
def mod_list(store: CatalogStore = Depends(get_store)) -> list[ModListEntry]:
    """
    List every mod that has at least one released version.

    Mods are ordered by their most recent release, newest first.

    Raises:
        StoreError: Mapped to HTTP 500 by the app's exception handlers

    Example response:
        [
          {"name": "Primitive Survival", "author": "Spear and Fang",
           "icon_src": null, "short_desc": "Traps, fishing and more"}
        ]
    """
    return list_mods(store)


@router.get("/mod/{name}", response_model=ModEntry)
def mod_data(name: str, store: CatalogStore = Depends(get_store)) -> ModEntry:
    """
    Get one mod and its versions, newest version label first.

    Raises:
        ModNotFoundError: Mapped to HTTP 404
        StoreError: Mapped to HTTP 500

    Example response:
        {
          "mod_info": {"name": "Primitive Survival", "author": "Spear and Fang",
                       "icon_src": null, "long_desc": "..."},
          "versions": [{"link": "https://.../ps_3.5.zip", "version": "3.5",
                        "changelog": null}]
        }
    """
    return get_mod(store, name)
