"""Roster models: users and their process assignments."""

from __future__ import annotations

import enum
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Enum, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database import Base


class UserRole(enum.StrEnum):
    """Roles known to the platform.

    The ``users.role`` column is mapped as a plain string so that a role
    added on the roster side still shows up in headcount breakdowns.
    """

    OWNER = "owner"
    ADMIN = "admin"
    MANAGER = "manager"
    TEAM_LEAD = "team_lead"
    QUALITY_ASSURANCE = "qualityassurance"
    TRAINER = "trainer"
    ADVISOR = "advisor"
    TRAINEE = "trainee"


class UserCategory(enum.StrEnum):
    """Whether a person is still in training or fully operational."""

    ACTIVE = "active"
    TRAINEE = "trainee"


class AssignmentStatus(enum.StrEnum):
    """Status of a user-to-process assignment."""

    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"


class User(Base):
    """A person on an organization's roster."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    employee_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(64), nullable=False)
    category: Mapped[UserCategory] = mapped_column(
        Enum(UserCategory, name="user_category_type", values_callable=lambda e: [x.value for x in e]),
        default=UserCategory.TRAINEE,
        nullable=False,
    )
    location_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("organization_locations.id"), nullable=True)
    last_working_day: Mapped[date | None] = mapped_column(Date, nullable=True)
    organization_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("organizations.id"), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role!r}, category={self.category})>"


class UserProcess(Base):
    """Links a user to a process. Ended by moving status away from ``assigned``."""

    __tablename__ = "user_processes"
    __table_args__ = (Index("ix_user_processes_process_status", "process_id", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    process_id: Mapped[int] = mapped_column(Integer, ForeignKey("organization_processes.id"), nullable=False)
    organization_id: Mapped[int] = mapped_column(Integer, ForeignKey("organizations.id"), nullable=False)
    line_of_business_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("organization_line_of_businesses.id"), nullable=True
    )
    location_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("organization_locations.id"), nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=AssignmentStatus.ASSIGNED)
    assigned_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
