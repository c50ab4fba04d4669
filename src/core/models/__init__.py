"""SQLAlchemy models read by the headcount analytics engine.

This package re-exports all models and enums from domain-specific modules
so that callers can use ``from src.core.models import X``.
"""

from src.core.models.organization import (
    Organization,
    OrganizationBatch,
    OrganizationLineOfBusiness,
    OrganizationLocation,
    OrganizationProcess,
)
from src.core.models.roster import AssignmentStatus, User, UserCategory, UserProcess, UserRole

__all__ = [
    "AssignmentStatus",
    "Organization",
    "OrganizationBatch",
    "OrganizationLineOfBusiness",
    "OrganizationLocation",
    "OrganizationProcess",
    "User",
    "UserCategory",
    "UserProcess",
    "UserRole",
]
