"""Pydantic schemas for headcount analytics routes.

Field names are serialised in camelCase; the reporting layer depends on
these keys.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProjectionPointResponse(CamelModel):
    date: str
    expected_headcount: int


class ProcessHeadcountResponse(CamelModel):
    process_id: int
    process_name: str
    total_headcount: int
    by_category: dict[str, int]
    by_role: dict[str, int]
    by_location: dict[str, int]
    projection: list[ProjectionPointResponse]


class RollupEntryResponse(ProcessHeadcountResponse):
    status: Literal["ok", "failed"]
    error: str | None = None


class HeadcountSummaryResponse(CamelModel):
    process_count: int
    degraded_process_ids: list[int]
    total_headcount: int
    by_category: dict[str, int]
    by_role: dict[str, int]
    by_location: dict[str, int]
    projection: list[ProjectionPointResponse]
    active_to_trainee_ratio: float | None = None
