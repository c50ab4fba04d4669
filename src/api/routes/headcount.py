"""Headcount analytics routes.

Read-only endpoints consumed by the reporting dashboard:
- all processes of an organization
- one process
- processes of one line of business
- an aggregate summary over either scope
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query

from src.api.deps import get_analytics_service
from src.api.schemas.headcount import (
    HeadcountSummaryResponse,
    ProcessHeadcountResponse,
    RollupEntryResponse,
)
from src.headcount.rollup import summarize
from src.headcount.service import HeadcountAnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/organizations/{organization_id}/analytics/headcount",
    tags=["headcount-analytics"],
)


@router.get("", response_model=list[RollupEntryResponse], response_model_exclude_none=True)
async def get_organization_headcount(
    organization_id: int,
    as_of: date | None = Query(None, description="Projection start date; defaults to today"),
    service: HeadcountAnalyticsService = Depends(get_analytics_service),
) -> list[dict[str, Any]]:
    """Headcount analytics for every process of the organization."""
    results = await service.organization_analytics(organization_id, today=as_of)
    return [r.to_dict() for r in results]


@router.get("/summary", response_model=HeadcountSummaryResponse)
async def get_headcount_summary(
    organization_id: int,
    line_of_business_id: int | None = Query(None),
    as_of: date | None = Query(None, description="Projection start date; defaults to today"),
    service: HeadcountAnalyticsService = Depends(get_analytics_service),
) -> dict[str, Any]:
    """Aggregate headcount over the organization or one line of business."""
    if line_of_business_id is None:
        results = await service.organization_analytics(organization_id, today=as_of)
    else:
        results = await service.line_of_business_analytics(organization_id, line_of_business_id, today=as_of)
    return summarize(results).to_dict()


@router.get("/process/{process_id}", response_model=ProcessHeadcountResponse)
async def get_process_headcount(
    organization_id: int,
    process_id: int,
    as_of: date | None = Query(None, description="Projection start date; defaults to today"),
    service: HeadcountAnalyticsService = Depends(get_analytics_service),
) -> dict[str, Any]:
    """Headcount analytics for one process."""
    analytics = await service.process_analytics(organization_id, process_id, today=as_of)
    return analytics.to_dict()


@router.get(
    "/line-of-business/{line_of_business_id}",
    response_model=list[RollupEntryResponse],
    response_model_exclude_none=True,
)
async def get_line_of_business_headcount(
    organization_id: int,
    line_of_business_id: int,
    as_of: date | None = Query(None, description="Projection start date; defaults to today"),
    service: HeadcountAnalyticsService = Depends(get_analytics_service),
) -> list[dict[str, Any]]:
    """Headcount analytics for the processes of one line of business."""
    results = await service.line_of_business_analytics(organization_id, line_of_business_id, today=as_of)
    return [r.to_dict() for r in results]
