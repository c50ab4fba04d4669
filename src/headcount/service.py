"""Headcount analytics service.

Runs the per-process pipeline (roster + schedule -> snapshot -> events ->
projection) and rolls it up to line-of-business and organization scope:

- process_analytics: one process; errors propagate to the caller
- organization_analytics: every process of an organization
- line_of_business_analytics: processes of one line of business

Rollups compute each process concurrently on its own database session and
isolate failures, so one broken process yields a failed entry instead of
blanking the whole dashboard.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.config import Settings
from src.headcount.errors import (
    INTERNAL_ERROR_MESSAGE,
    DataAccessError,
    NotFoundError,
    PartialComputationError,
    client_message,
)
from src.headcount.events import extract_deltas
from src.headcount.gateways import HeadcountGateways, ProcessRecord
from src.headcount.projection import ProjectionPoint, simulate_projection
from src.headcount.snapshot import HeadcountSnapshot, aggregate_snapshot, empty_category_counts

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], date]
GatewayProvider = Callable[[], AbstractAsyncContextManager[HeadcountGateways]]


@dataclass(frozen=True)
class ProcessHeadcountAnalytics:
    """Current breakdown and forward projection for one process."""

    process_id: int
    process_name: str
    total_headcount: int
    by_category: dict[str, int] = field(default_factory=empty_category_counts)
    by_role: dict[str, int] = field(default_factory=dict)
    by_location: dict[str, int] = field(default_factory=dict)
    projection: list[ProjectionPoint] = field(default_factory=list)

    @classmethod
    def empty(cls, process_id: int, process_name: str) -> ProcessHeadcountAnalytics:
        return cls(process_id=process_id, process_name=process_name, total_headcount=0)

    @classmethod
    def from_snapshot(
        cls,
        process: ProcessRecord,
        snapshot: HeadcountSnapshot,
        projection: list[ProjectionPoint],
    ) -> ProcessHeadcountAnalytics:
        return cls(
            process_id=process.id,
            process_name=process.name,
            total_headcount=snapshot.total_headcount,
            by_category=snapshot.by_category,
            by_role=snapshot.by_role,
            by_location=snapshot.by_location,
            projection=projection,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "processId": self.process_id,
            "processName": self.process_name,
            "totalHeadcount": self.total_headcount,
            "byCategory": dict(self.by_category),
            "byRole": dict(self.by_role),
            "byLocation": dict(self.by_location),
            "projection": [p.to_dict() for p in self.projection],
        }


@dataclass(frozen=True)
class ProcessAnalyticsResult:
    """One rollup entry: either computed analytics or the failure that prevented them."""

    process_id: int
    process_name: str
    analytics: ProcessHeadcountAnalytics | None = None
    error: PartialComputationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, analytics: ProcessHeadcountAnalytics) -> ProcessAnalyticsResult:
        return cls(process_id=analytics.process_id, process_name=analytics.process_name, analytics=analytics)

    @classmethod
    def failure(cls, error: PartialComputationError) -> ProcessAnalyticsResult:
        return cls(process_id=error.process_id, process_name=error.process_name, error=error)

    def to_dict(self) -> dict[str, Any]:
        if self.analytics is not None:
            return {**self.analytics.to_dict(), "status": "ok"}
        # Zeroed figures let the dashboard render a degraded card
        return {
            **ProcessHeadcountAnalytics.empty(self.process_id, self.process_name).to_dict(),
            "status": "failed",
            "error": client_message(self.error.cause) if self.error else INTERNAL_ERROR_MESSAGE,
        }


def sql_gateway_provider(session_factory: async_sessionmaker[AsyncSession]) -> GatewayProvider:
    """Open SQL-backed gateways on a fresh session per pipeline."""

    @asynccontextmanager
    async def _open() -> AsyncIterator[HeadcountGateways]:
        async with session_factory() as session:
            yield HeadcountGateways.from_session(session)

    return _open


class HeadcountAnalyticsService:
    """Computes process headcount analytics and their LOB/organization rollups.

    Attributes:
        gateways: Opens the data gateways for one pipeline run.
        max_concurrency: Upper bound on processes computed at once in a rollup.
        gateway_timeout_seconds: Deadline applied to every gateway call.
        clock: Source of "today" when the caller does not pass one.
    """

    def __init__(
        self,
        gateways: GatewayProvider,
        *,
        max_concurrency: int = 8,
        gateway_timeout_seconds: float = 10.0,
        clock: Clock = date.today,
    ) -> None:
        self.gateways = gateways
        self.max_concurrency = max_concurrency
        self.gateway_timeout_seconds = gateway_timeout_seconds
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
        clock: Clock = date.today,
    ) -> HeadcountAnalyticsService:
        return cls(
            sql_gateway_provider(session_factory),
            max_concurrency=settings.analytics_max_concurrency,
            gateway_timeout_seconds=settings.analytics_gateway_timeout_seconds,
            clock=clock,
        )

    async def process_analytics(
        self,
        organization_id: int,
        process_id: int,
        today: date | None = None,
    ) -> ProcessHeadcountAnalytics:
        """Compute analytics for one process.

        Raises:
            NotFoundError: The process does not exist in the organization.
            DataAccessError: A gateway call failed or timed out.
        """
        as_of = today or self.clock()
        async with self.gateways() as gw:
            process = await self._call(gw.catalog.get_process(organization_id, process_id))
            if process is None:
                raise NotFoundError("process", process_id, organization_id)
            return await self._compute(gw, organization_id, process, as_of)

    async def organization_analytics(
        self,
        organization_id: int,
        today: date | None = None,
    ) -> list[ProcessAnalyticsResult]:
        """Compute one entry per process of the organization.

        Raises:
            NotFoundError: The organization does not exist.
            DataAccessError: The process list could not be read.
        """
        as_of = today or self.clock()
        async with self.gateways() as gw:
            if not await self._call(gw.catalog.organization_exists(organization_id)):
                raise NotFoundError("organization", organization_id)
            processes = await self._call(gw.catalog.processes_for(organization_id))
        return await self._rollup(organization_id, processes, as_of)

    async def line_of_business_analytics(
        self,
        organization_id: int,
        line_of_business_id: int,
        today: date | None = None,
    ) -> list[ProcessAnalyticsResult]:
        """Compute one entry per process of a line of business.

        Returns an empty list when no process belongs to the line of business.
        """
        as_of = today or self.clock()
        async with self.gateways() as gw:
            processes = await self._call(
                gw.catalog.processes_for(organization_id, line_of_business_id=line_of_business_id)
            )
        if not processes:
            logger.info(
                "No processes for line of business %s in organization %s", line_of_business_id, organization_id
            )
            return []
        return await self._rollup(organization_id, processes, as_of)

    # -- Pipeline ---------------------------------------------------------------

    async def _compute(
        self,
        gw: HeadcountGateways,
        organization_id: int,
        process: ProcessRecord,
        as_of: date,
    ) -> ProcessHeadcountAnalytics:
        roster = await self._call(gw.roster.fetch_assigned_roster(organization_id, process.id))
        if not roster:
            return ProcessHeadcountAnalytics.empty(process.id, process.name)

        location_ids = {p.location_id for p in roster if p.location_id is not None}
        location_names: dict[int, str] = {}
        if location_ids:
            location_names = await self._call(gw.locations.names_for(location_ids, organization_id=organization_id))

        handovers = await self._call(gw.schedule.fetch_future_handovers(organization_id, process.id, as_of))

        snapshot = aggregate_snapshot(roster, location_names)
        deltas = extract_deltas(roster, handovers)
        projection = simulate_projection(snapshot.total_headcount, deltas, as_of)
        return ProcessHeadcountAnalytics.from_snapshot(process, snapshot, projection)

    async def _rollup(
        self,
        organization_id: int,
        processes: Sequence[ProcessRecord],
        as_of: date,
    ) -> list[ProcessAnalyticsResult]:
        sem = asyncio.Semaphore(self.max_concurrency)

        async def _one(process: ProcessRecord) -> ProcessHeadcountAnalytics:
            async with sem, self.gateways() as gw:
                return await self._compute(gw, organization_id, process, as_of)

        raw_results = await asyncio.gather(*[_one(p) for p in processes], return_exceptions=True)

        results: list[ProcessAnalyticsResult] = []
        for process, outcome in zip(processes, raw_results, strict=True):
            if isinstance(outcome, Exception):
                logger.warning(
                    "Headcount analytics failed for process %s (%s) in organization %s: %s",
                    process.id,
                    process.name,
                    organization_id,
                    outcome,
                )
                error = PartialComputationError(process.id, process.name, outcome)
                results.append(ProcessAnalyticsResult.failure(error))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(ProcessAnalyticsResult.success(outcome))
        return results

    async def _call(self, awaitable: Awaitable[T]) -> T:
        """Await a gateway call under the configured deadline."""
        try:
            async with asyncio.timeout(self.gateway_timeout_seconds):
                return await awaitable
        except TimeoutError as exc:
            raise DataAccessError(f"Gateway call timed out after {self.gateway_timeout_seconds}s") from exc
