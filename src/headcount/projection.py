"""Forward headcount projection.

Walks a fixed horizon one day at a time from ``today``, applying the day's
net delta before sampling. A point is emitted every ``sample_interval_days``
and on every day that carries a delta, so each step change is visible while
the series stays sparse.

The running total is not clamped: a negative value means attrition is
outpacing onboarding.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

logger = logging.getLogger(__name__)

PROJECTION_HORIZON_DAYS = 90
SAMPLE_INTERVAL_DAYS = 7


@dataclass(frozen=True)
class ProjectionPoint:
    """Expected headcount on one date."""

    date: date
    expected_headcount: int

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date.isoformat(), "expectedHeadcount": self.expected_headcount}


def simulate_projection(
    total_headcount: int,
    deltas: Mapping[date, int],
    today: date,
    horizon_days: int = PROJECTION_HORIZON_DAYS,
    sample_interval_days: int = SAMPLE_INTERVAL_DAYS,
) -> list[ProjectionPoint]:
    """Project headcount over the next ``horizon_days`` days.

    Args:
        total_headcount: Headcount on ``today`` before any event is applied.
        deltas: Net change per date. Dates before ``today`` or beyond the
            horizon are not applied.
        today: First simulated day (offset 0).
        horizon_days: Number of days simulated.
        sample_interval_days: Cadence of the regular samples.

    Returns:
        Projection points in ascending date order.
    """
    if sample_interval_days < 1:
        raise ValueError("sample_interval_days must be at least 1")

    events = sorted(deltas.items())
    cursor = 0
    while cursor < len(events) and events[cursor][0] < today:
        cursor += 1

    running_total = total_headcount
    points: list[ProjectionPoint] = []

    for offset in range(horizon_days):
        day = today + timedelta(days=offset)
        is_event_day = cursor < len(events) and events[cursor][0] == day
        if is_event_day:
            running_total += events[cursor][1]
            cursor += 1

        if offset % sample_interval_days == 0 or is_event_day:
            points.append(ProjectionPoint(date=day, expected_headcount=running_total))

    logger.debug(
        "Projected %d points from %s (start=%d, end=%d)",
        len(points),
        today.isoformat(),
        total_headcount,
        running_total,
    )
    return points
