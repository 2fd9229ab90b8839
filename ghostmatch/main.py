"""
GhostMatch — FastAPI Application Entry Point

- Lifespan-managed match store (bundle loaded on startup, flushed on shutdown)
- CORS and structured-logging middleware
- Store errors translated to HTTP status codes
- Health-check endpoints (liveness + storage readiness)
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from ghostmatch.bootstrap import build_catalog, build_store
from ghostmatch.config import Settings, get_settings
from ghostmatch.errors import ConflictError, NotFoundError, StoreError, ValidationFailure
from ghostmatch.services.catalog import ProfileCatalog
from ghostmatch.services.match_store import MatchStore

# ---------------------------------------------------------------------------
# Structured logging configuration
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger: structlog.stdlib.BoundLogger = structlog.get_logger("ghostmatch")


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.exception(
                "request_error",
                method=request.method,
                path=request.url.path,
                duration_ms=round(duration_ms, 2),
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "request_handled",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        return response


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------

_STATUS_BY_ERROR: list[tuple[type[StoreError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationFailure, 422),
]


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = code
            break
    logger.warning(
        "store_error",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[MatchStore] = None,
    catalog: Optional[ProfileCatalog] = None,
) -> FastAPI:
    """Build the FastAPI app.

    ``store`` and ``catalog`` may be injected (tests); otherwise they are built
    from ``settings`` when the app starts.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "startup_begin",
            environment=settings.ENVIRONMENT,
            storage_backend=settings.STORAGE_BACKEND,
        )

        app.state.catalog = catalog if catalog is not None else build_catalog(settings)
        app.state.store = (store if store is not None else build_store(settings)).open()
        if app.state.store.load_error is not None:
            logger.warning("startup_bundle_fallback", error=str(app.state.store.load_error))

        logger.info("startup_complete", candidates=len(app.state.catalog))

        yield

        logger.info("shutdown_begin")
        app.state.store.close()
        logger.info("shutdown_complete")

    app = FastAPI(
        title="GhostMatch",
        description="Anonymous campus matching: queue, matches, chat and notifications",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StoreError, store_error_handler)

    @app.get("/health", tags=["health"])
    async def health_liveness() -> dict:
        """Liveness probe; healthy whenever the process is running."""
        return {"status": "healthy"}

    @app.get("/health/deep", tags=["health"])
    def health_deep(request: Request) -> dict:
        """Readiness probe; verifies the bundle backend is reachable."""
        result: dict = {
            "status": "healthy",
            "storage": "connected",
            "unsaved_changes": False,
        }
        match_store: MatchStore = request.app.state.store
        try:
            match_store.gateway.ping()
        except Exception as exc:
            logger.error("health_storage_failure", error=str(exc))
            result["storage"] = f"error: {exc}"
            result["status"] = "degraded"

        if match_store.has_unsaved_changes:
            result["unsaved_changes"] = True
            result["status"] = "degraded"
        return result

    from ghostmatch.api.router import router as api_router

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
