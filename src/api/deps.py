"""Shared FastAPI dependencies.

Provides the headcount analytics service used by route handlers.
"""

from __future__ import annotations

from fastapi import Depends, Request

from src.core.config import Settings, get_settings
from src.headcount.service import HeadcountAnalyticsService


def get_analytics_service(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> HeadcountAnalyticsService:
    """Build the analytics service over the app's session factory.

    The service opens its own sessions so rollups can query several
    processes concurrently.
    """
    return HeadcountAnalyticsService.from_settings(request.app.state.db_session_factory, settings)
