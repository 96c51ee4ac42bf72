"""
Sync API route.

- GET /api/run-sync/{token} - Run a full sync if the token matches

Every outcome (synced, rejected, failed) answers with the same redirect
to /api, so callers cannot tell a wrong token from a right one. The
outcome is logged and kept as the orchestrator's last_result.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from modcat.core.catalog.api.deps import get_orchestrator
from modcat.core.catalog.sync.orchestrator import SyncOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/run-sync/{token}")
def run_sync(
    token: str,
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
) -> RedirectResponse:
    """Run a sync cycle and redirect to /api."""
    result = orchestrator.run_sync(token)
    if result.success:
        logger.info(
            f"Sync via API: {result.mods_synced} mods, {result.versions_synced} versions"
        )
    elif not result.rejected:
        logger.error(f"Sync via API failed: {'; '.join(result.errors)}")
    return RedirectResponse(url="/api", status_code=status.HTTP_303_SEE_OTHER)
