"""Present-day headcount breakdowns for a process roster.

A single pass over the roster yields three views that partition the same
set of people: by category, by role and by location.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from src.core.models import UserCategory
from src.headcount.gateways import RosterEntry

logger = logging.getLogger(__name__)

UNASSIGNED_LOCATION = "Unassigned"
UNKNOWN_LOCATION = "Unknown"


def empty_category_counts() -> dict[str, int]:
    return {UserCategory.ACTIVE.value: 0, UserCategory.TRAINEE.value: 0}


@dataclass(frozen=True)
class HeadcountSnapshot:
    """Current headcount of one process."""

    total_headcount: int
    by_category: dict[str, int] = field(default_factory=empty_category_counts)
    by_role: dict[str, int] = field(default_factory=dict)
    by_location: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalHeadcount": self.total_headcount,
            "byCategory": dict(self.by_category),
            "byRole": dict(self.by_role),
            "byLocation": dict(self.by_location),
        }


def aggregate_snapshot(
    roster: Sequence[RosterEntry],
    location_names: Mapping[int, str],
) -> HeadcountSnapshot:
    """Count a roster by category, role and location.

    Args:
        roster: People assigned to the process.
        location_names: Resolved location id -> name. Ids missing from this
            map are counted under "Unknown"; people without a location are
            counted under "Unassigned".

    Returns:
        HeadcountSnapshot whose total is the roster length.
    """
    by_category = empty_category_counts()
    by_role: dict[str, int] = {}
    by_location: dict[str, int] = {}

    for person in roster:
        if person.category in by_category:
            by_category[person.category] += 1
        else:
            logger.debug("Ignoring unrecognised category %r for user %s", person.category, person.id)

        by_role[person.role] = by_role.get(person.role, 0) + 1

        if person.location_id is None:
            location = UNASSIGNED_LOCATION
        else:
            location = location_names.get(person.location_id, UNKNOWN_LOCATION)
        by_location[location] = by_location.get(location, 0) + 1

    return HeadcountSnapshot(
        total_headcount=len(roster),
        by_category=by_category,
        by_role=by_role,
        by_location=by_location,
    )
