"""Health check endpoint.

Reports overall service health and the status of the PostgreSQL
connection the analytics gateways read from.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.api.version import API_VERSION

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/api/v1/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Check the health of the service.

    Returns:
        JSON object with overall status and per-service health:
        {
            "status": "healthy" | "unhealthy",
            "services": {"postgres": "up" | "down"},
            "version": "0.3.0"
        }
    """
    services: dict[str, str] = {}

    try:
        db_session_factory = request.app.state.db_session_factory
        async with db_session_factory() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            services["postgres"] = "up"
    except (SQLAlchemyError, ConnectionError, OSError):
        logger.warning("PostgreSQL health check failed")
        services["postgres"] = "down"

    status = "healthy" if all(s == "up" for s in services.values()) else "unhealthy"

    return {
        "status": status,
        "services": services,
        "version": API_VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
    }
