"""Organization structure models: organizations, lines of business, locations, processes, batches.

These tables are owned by the training platform's CRUD layer. The analytics
engine maps only the columns it reads and never writes through them.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database import Base


class Organization(Base):
    """A tenant of the training platform."""

    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name!r})>"


class OrganizationLineOfBusiness(Base):
    """A grouping of processes under a business category."""

    __tablename__ = "organization_line_of_businesses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    organization_id: Mapped[int] = mapped_column(Integer, ForeignKey("organizations.id"), nullable=False)


class OrganizationLocation(Base):
    """A site people are based at. Used only to label location buckets."""

    __tablename__ = "organization_locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    organization_id: Mapped[int] = mapped_column(Integer, ForeignKey("organizations.id"), nullable=False)

    def __repr__(self) -> str:
        return f"<OrganizationLocation(id={self.id}, name={self.name!r})>"


class OrganizationProcess(Base):
    """A named workflow or queue that people are assigned to."""

    __tablename__ = "organization_processes"
    __table_args__ = (Index("ix_organization_processes_org_lob", "organization_id", "line_of_business_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="active")
    line_of_business_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("organization_line_of_businesses.id"), nullable=True
    )
    organization_id: Mapped[int] = mapped_column(Integer, ForeignKey("organizations.id"), nullable=False)

    def __repr__(self) -> str:
        return f"<OrganizationProcess(id={self.id}, name={self.name!r}, lob={self.line_of_business_id})>"


class OrganizationBatch(Base):
    """A cohort of trainees moving through training together.

    Only ``handover_to_ops_date`` and ``capacity_limit`` matter for
    projections: on the handover date the batch's capacity joins the
    process's operational headcount.
    """

    __tablename__ = "organization_batches"
    __table_args__ = (Index("ix_organization_batches_org_process", "organization_id", "process_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="planned")
    capacity_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    process_id: Mapped[int] = mapped_column(Integer, ForeignKey("organization_processes.id"), nullable=False)
    organization_id: Mapped[int] = mapped_column(Integer, ForeignKey("organizations.id"), nullable=False)
    handover_to_ops_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    def __repr__(self) -> str:
        return f"<OrganizationBatch(id={self.id}, process_id={self.process_id}, handover={self.handover_to_ops_date})>"
