"""Read-only data gateways feeding the headcount analytics engine.

Each gateway is described by a ``Protocol`` so the analytics service can be
driven by any source, and ships with an SQLAlchemy async implementation over
the training platform tables:

- RosterGateway: people currently assigned to a process
- ScheduleGateway: future batch handovers into operations
- LocationResolver: location id set -> display name
- ProcessCatalog: processes of an organization

Storage failures are translated to ``DataAccessError`` at this boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Collection, Sequence
from dataclasses import dataclass
from datetime import date
from functools import wraps
from typing import Any, ParamSpec, Protocol, TypeVar

from sqlalchemy import Row, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from src.core.models import (
    AssignmentStatus,
    Organization,
    OrganizationBatch,
    OrganizationLocation,
    OrganizationProcess,
    User,
    UserProcess,
)
from src.headcount.errors import DataAccessError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


# -- Records ---


@dataclass(frozen=True)
class RosterEntry:
    """One person assigned to a process, as seen by the analytics engine."""

    id: int
    role: str
    category: str
    location_id: int | None = None
    last_working_day: date | None = None


@dataclass(frozen=True)
class ScheduledHandover:
    """A batch graduating into operational headcount on ``handover_date``."""

    handover_date: date
    capacity_limit: int | None


@dataclass(frozen=True)
class ProcessRecord:
    """Identity of a process and the line of business it belongs to."""

    id: int
    name: str
    line_of_business_id: int | None = None


# -- Contracts ---


class RosterGateway(Protocol):
    async def fetch_assigned_roster(self, organization_id: int, process_id: int) -> list[RosterEntry]: ...


class ScheduleGateway(Protocol):
    async def fetch_future_handovers(
        self, organization_id: int, process_id: int, as_of: date
    ) -> list[ScheduledHandover]: ...


class LocationResolver(Protocol):
    async def names_for(self, ids: Collection[int], *, organization_id: int) -> dict[int, str]: ...


class ProcessCatalog(Protocol):
    async def organization_exists(self, organization_id: int) -> bool: ...

    async def get_process(self, organization_id: int, process_id: int) -> ProcessRecord | None: ...

    async def processes_for(
        self, organization_id: int, line_of_business_id: int | None = None
    ) -> list[ProcessRecord]: ...


@dataclass(frozen=True)
class HeadcountGateways:
    """The four collaborators one analytics pipeline needs, bound together."""

    catalog: ProcessCatalog
    roster: RosterGateway
    schedule: ScheduleGateway
    locations: LocationResolver

    @classmethod
    def from_session(cls, session: AsyncSession) -> HeadcountGateways:
        """Build SQL-backed gateways sharing one database session."""
        return cls(
            catalog=SqlProcessCatalog(session),
            roster=SqlRosterGateway(session),
            schedule=SqlScheduleGateway(session),
            locations=SqlLocationResolver(session),
        )


# -- Helpers ---


def translate_storage_errors(func_: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Re-raise storage failures from a gateway coroutine as DataAccessError."""

    @wraps(func_)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await func_(*args, **kwargs)
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("Storage call %s failed", func_.__qualname__)
            raise DataAccessError(f"{func_.__qualname__} failed: {exc}") from exc

    return wrapper


async def fetch_by_ids(
    session: AsyncSession,
    id_column: InstrumentedAttribute[int],
    ids: Collection[int],
    *columns: InstrumentedAttribute[Any],
    criteria: Sequence[Any] = (),
) -> Sequence[Row[Any]]:
    """Fetch ``(id, *columns)`` rows whose id is in ``ids``.

    The id set is bound as a single expanding parameter, never interpolated
    into the SQL text. An empty id set short-circuits without a query.
    """
    unique_ids = sorted(set(ids))
    if not unique_ids:
        return []
    result = await session.execute(select(id_column, *columns).where(id_column.in_(unique_ids), *criteria))
    return result.all()


# -- SQL implementations ---


class SqlRosterGateway:
    """Roster lookups over ``user_processes`` joined to ``users``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_storage_errors
    async def fetch_assigned_roster(self, organization_id: int, process_id: int) -> list[RosterEntry]:
        """Return everyone whose assignment to the process is ``assigned``.

        A person with duplicate assignment rows is returned once. An empty
        list is a valid answer, not an error.
        """
        result = await self._session.execute(
            select(
                User.id,
                User.role,
                User.category,
                User.location_id,
                User.last_working_day,
            )
            .join(UserProcess, UserProcess.user_id == User.id)
            .where(
                UserProcess.process_id == process_id,
                UserProcess.organization_id == organization_id,
                UserProcess.status == AssignmentStatus.ASSIGNED,
                User.organization_id == organization_id,
            )
            .distinct()
            .order_by(User.id)
        )
        return [
            RosterEntry(
                id=row.id,
                role=str(row.role),
                category=str(row.category),
                location_id=row.location_id,
                last_working_day=row.last_working_day,
            )
            for row in result.all()
        ]


class SqlScheduleGateway:
    """Batch handover lookups over ``organization_batches``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_storage_errors
    async def fetch_future_handovers(
        self, organization_id: int, process_id: int, as_of: date
    ) -> list[ScheduledHandover]:
        """Return batches handing over to operations on or after ``as_of``."""
        result = await self._session.execute(
            select(OrganizationBatch.handover_to_ops_date, OrganizationBatch.capacity_limit)
            .where(
                OrganizationBatch.process_id == process_id,
                OrganizationBatch.organization_id == organization_id,
                OrganizationBatch.handover_to_ops_date.is_not(None),
                OrganizationBatch.handover_to_ops_date >= as_of,
            )
            .order_by(OrganizationBatch.handover_to_ops_date)
        )
        return [
            ScheduledHandover(handover_date=row.handover_to_ops_date, capacity_limit=row.capacity_limit)
            for row in result.all()
        ]


class SqlLocationResolver:
    """Resolves location ids to names within one organization."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_storage_errors
    async def names_for(self, ids: Collection[int], *, organization_id: int) -> dict[int, str]:
        rows = await fetch_by_ids(
            self._session,
            OrganizationLocation.id,
            ids,
            OrganizationLocation.name,
            criteria=[OrganizationLocation.organization_id == organization_id],
        )
        return {row.id: row.name for row in rows}


class SqlProcessCatalog:
    """Process enumeration over ``organization_processes``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_storage_errors
    async def organization_exists(self, organization_id: int) -> bool:
        result = await self._session.execute(
            select(func.count(Organization.id)).where(Organization.id == organization_id)
        )
        return bool(result.scalar())

    @translate_storage_errors
    async def get_process(self, organization_id: int, process_id: int) -> ProcessRecord | None:
        result = await self._session.execute(
            select(OrganizationProcess)
            .where(
                OrganizationProcess.id == process_id,
                OrganizationProcess.organization_id == organization_id,
            )
            .limit(1)
        )
        process = result.scalar_one_or_none()
        if process is None:
            return None
        return _to_record(process)

    @translate_storage_errors
    async def processes_for(
        self, organization_id: int, line_of_business_id: int | None = None
    ) -> list[ProcessRecord]:
        """List the organization's processes, optionally restricted to one LOB."""
        query = select(OrganizationProcess).where(OrganizationProcess.organization_id == organization_id)
        if line_of_business_id is not None:
            query = query.where(OrganizationProcess.line_of_business_id == line_of_business_id)
        result = await self._session.execute(query.order_by(OrganizationProcess.id))
        return [_to_record(p) for p in result.scalars().all()]


def _to_record(process: OrganizationProcess) -> ProcessRecord:
    return ProcessRecord(
        id=process.id,
        name=process.name,
        line_of_business_id=process.line_of_business_id,
    )
