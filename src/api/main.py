"""Headcount analytics FastAPI application entry point.

Configures the FastAPI app with:
- Logging at the configured level
- CORS, request ID and access log middleware
- Lifespan events for the PostgreSQL connection pool
- Health and headcount analytics routes
- Error handlers mapping analytics errors to HTTP status codes
- OpenAPI documentation at /docs (debug mode only)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.middleware.security import RequestIDMiddleware, RequestLoggingMiddleware
from src.api.routes import headcount, health
from src.api.version import API_VERSION
from src.core.config import Settings, get_settings
from src.core.database import create_engine
from src.headcount.errors import DATA_UNAVAILABLE_MESSAGE, DataAccessError, NotFoundError

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database pool on startup and dispose of it on shutdown."""
    settings = get_settings()

    engine, session_factory = create_engine(settings)
    app.state.db_engine = engine
    app.state.db_session_factory = session_factory
    logger.info("PostgreSQL connection pool initialized")

    yield

    await engine.dispose()
    logger.info("All connections closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Headcount snapshots and 90-day staffing projections per process, LOB and organization",
        version=API_VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Note: middleware is applied in reverse order (last added = first executed).
    # RequestIDMiddleware runs first so the access log can carry the id.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID", "Accept"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router)
    app.include_router(headcount.router)

    # -- Error Handlers ---
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "unknown")
        logger.info("Not found [%s]: %s", request_id, exc)
        return JSONResponse(
            status_code=404,
            content={"detail": str(exc), "request_id": request_id},
        )

    @app.exception_handler(DataAccessError)
    async def data_access_handler(request: Request, exc: DataAccessError) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error("Data access error [%s]: %s", request_id, exc)
        return JSONResponse(
            status_code=503,
            content={"detail": DATA_UNAVAILABLE_MESSAGE, "request_id": request_id},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "unknown")
        logger.warning("Validation error [%s]: %s", request_id, exc)
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "request_id": request_id},
        )

    @app.exception_handler(Exception)  # Intentionally broad: top-level global error handler
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "unknown")
        logger.exception("Unhandled error [%s]: %s", request_id, exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "request_id": request_id},
        )

    return app


# Application instance used by uvicorn
app = create_app()
