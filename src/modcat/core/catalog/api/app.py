"""
FastAPI application setup for the mod catalog.

Creates the FastAPI app around an explicitly owned CatalogStore and
SyncOrchestrator, registers routes and maps catalog errors to responses.

Error mapping:
- ModNotFoundError -> 404 NOT_FOUND
- StoreError (connection, query, schema) -> 500 DATABASE_ERROR
- anything else -> 500 INTERNAL_ERROR
Clients only ever see a generic message; details go to the log.
"""

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from modcat import __version__
from modcat.core.catalog.api.routes import mods, sync
from modcat.core.catalog.db.connection import CatalogStore
from modcat.core.catalog.errors import ModNotFoundError, StoreError
from modcat.core.catalog.sync.orchestrator import SyncOrchestrator
from modcat.core.catalog.sync.scheduler import SyncScheduler
from modcat.core.config.models import CatalogSettings

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for API responses."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Server errors (5xx)
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error_code: ErrorCode
    message: str
    request_id: str | None = None


def _error_response(
    status_code: int, error_code: ErrorCode, message: str, request: Request
) -> JSONResponse:
    body = ErrorResponse(error_code=error_code, message=message, request_id=str(id(request)))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def create_app(
    settings: CatalogSettings,
    *,
    store: CatalogStore | None = None,
    orchestrator: SyncOrchestrator | None = None,
) -> FastAPI:
    """
    Build the catalog API application.

    The store is not initialized here; callers create the schema before
    serving (see CatalogStore.initialize).

    Args:
        settings: Loaded settings
        store: Local store (defaults to one at settings.db_path)
        orchestrator: Sync orchestrator (defaults to one reading from
            settings.remote_url)

    Returns:
        Configured FastAPI app with ``state.store``, ``state.orchestrator``
        and ``state.settings`` set
    """
    if store is None:
        store = CatalogStore(settings.db_path)
    if orchestrator is None:
        orchestrator = SyncOrchestrator.from_settings(store, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        scheduler: SyncScheduler | None = None
        if settings.sync_interval_minutes > 0:
            scheduler = SyncScheduler(orchestrator, settings.sync_interval_minutes * 60)
            scheduler.start()
        app.state.scheduler = scheduler
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.stop()

    app = FastAPI(
        title="Modcat API",
        description="Catalog of mods and their released versions",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.orchestrator = orchestrator
    app.state.scheduler = None

    # Credentials cannot be combined with a wildcard origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(mods.router, prefix="/api", tags=["mods"])
    app.include_router(sync.router, prefix="/api", tags=["sync"])

    @app.get("/health")
    def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    _register_exception_handlers(app)
    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ModNotFoundError)
    async def not_found_handler(request: Request, exc: ModNotFoundError) -> JSONResponse:
        logger.info(
            "HTTP 404 on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            extra={"request_id": id(request)},
        )
        return _error_response(status.HTTP_404_NOT_FOUND, ErrorCode.NOT_FOUND, str(exc), request)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(
            "HTTP 500 on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            extra={"request_id": id(request)},
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorCode.DATABASE_ERROR,
            "Catalog unavailable",
            request,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        error_code = ErrorCode.INTERNAL_ERROR
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            error_code = ErrorCode.NOT_FOUND

        if exc.status_code >= 500:
            logger.error(
                "HTTP %d on %s %s: %s",
                exc.status_code,
                request.method,
                request.url.path,
                exc.detail,
                extra={"request_id": id(request)},
            )
        else:
            logger.info(
                "HTTP %d on %s %s: %s",
                exc.status_code,
                request.method,
                request.url.path,
                exc.detail,
                extra={"request_id": id(request)},
            )

        detail_msg = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return _error_response(exc.status_code, error_code, detail_msg, request)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            extra={"request_id": id(request)},
        )
        return _error_response(
            422,
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            request,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.url.path,
            str(exc),
            traceback.format_exc(),
            extra={"request_id": id(request)},
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorCode.INTERNAL_ERROR,
            "An internal server error occurred",
            request,
        )
