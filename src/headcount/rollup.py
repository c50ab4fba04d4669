"""Fold per-process analytics into one organization or line-of-business summary.

The summary's figures are plain key-wise sums of the successful entries, so
an organization total always equals the sum of its process totals. Failed
entries contribute nothing and are listed as degraded.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from src.core.models import UserCategory
from src.headcount.projection import ProjectionPoint
from src.headcount.service import ProcessAnalyticsResult
from src.headcount.snapshot import empty_category_counts


@dataclass(frozen=True)
class HeadcountSummary:
    """Aggregate headcount across a set of processes."""

    process_count: int
    total_headcount: int
    by_category: dict[str, int] = field(default_factory=empty_category_counts)
    by_role: dict[str, int] = field(default_factory=dict)
    by_location: dict[str, int] = field(default_factory=dict)
    projection: list[ProjectionPoint] = field(default_factory=list)
    degraded_process_ids: list[int] = field(default_factory=list)

    @property
    def active_to_trainee_ratio(self) -> float | None:
        trainees = self.by_category.get(UserCategory.TRAINEE, 0)
        if trainees == 0:
            return None
        return round(self.by_category.get(UserCategory.ACTIVE, 0) / trainees, 2)

    def to_dict(self) -> dict[str, Any]:
        return {
            "processCount": self.process_count,
            "degradedProcessIds": list(self.degraded_process_ids),
            "totalHeadcount": self.total_headcount,
            "byCategory": dict(self.by_category),
            "byRole": dict(self.by_role),
            "byLocation": dict(self.by_location),
            "projection": [p.to_dict() for p in self.projection],
            "activeToTraineeRatio": self.active_to_trainee_ratio,
        }


def summarize(results: Sequence[ProcessAnalyticsResult]) -> HeadcountSummary:
    """Sum a rollup's successful entries.

    Projections are merged over the union of every process's sample dates.
    Between its own samples a process holds its last sampled value, so each
    merged point counts every process, not only those sampled that day.
    """
    total = 0
    by_category = empty_category_counts()
    by_role: dict[str, int] = {}
    by_location: dict[str, int] = {}
    series: list[list[ProjectionPoint]] = []
    degraded: list[int] = []

    for entry in results:
        analytics = entry.analytics
        if analytics is None:
            degraded.append(entry.process_id)
            continue

        total += analytics.total_headcount
        _add_counts(by_category, analytics.by_category)
        _add_counts(by_role, analytics.by_role)
        _add_counts(by_location, analytics.by_location)
        if analytics.projection:
            series.append(sorted(analytics.projection, key=lambda p: p.date))

    return HeadcountSummary(
        process_count=len(results),
        total_headcount=total,
        by_category=by_category,
        by_role=by_role,
        by_location=by_location,
        projection=merge_projections(series),
        degraded_process_ids=degraded,
    )


def merge_projections(series: Sequence[Sequence[ProjectionPoint]]) -> list[ProjectionPoint]:
    """Sum date-ordered projections as step functions.

    A process contributes nothing before its first sample.
    """
    dates = sorted({point.date for points in series for point in points})
    cursors = [0] * len(series)
    current = [0] * len(series)
    merged: list[ProjectionPoint] = []

    for day in dates:
        for i, points in enumerate(series):
            while cursors[i] < len(points) and points[cursors[i]].date <= day:
                current[i] = points[cursors[i]].expected_headcount
                cursors[i] += 1
        merged.append(ProjectionPoint(date=day, expected_headcount=sum(current)))
    return merged


def _add_counts(target: dict[str, int], counts: dict[str, int]) -> None:
    for key, value in counts.items():
        target[key] = target.get(key, 0) + value
