"""Tests for present-day headcount aggregation."""

from __future__ import annotations

from datetime import date

import pytest

from src.headcount.gateways import RosterEntry
from src.headcount.snapshot import UNASSIGNED_LOCATION, UNKNOWN_LOCATION, aggregate_snapshot

LOCATIONS = {1: "Pune", 2: "Manila"}


def _person(
    person_id: int,
    role: str = "advisor",
    category: str = "active",
    location_id: int | None = 1,
    last_working_day: date | None = None,
) -> RosterEntry:
    return RosterEntry(
        id=person_id,
        role=role,
        category=category,
        location_id=location_id,
        last_working_day=last_working_day,
    )


def _assert_partitions(snapshot, size: int) -> None:
    assert snapshot.total_headcount == size
    assert sum(snapshot.by_category.values()) == size
    assert sum(snapshot.by_role.values()) == size
    assert sum(snapshot.by_location.values()) == size


class TestAggregateSnapshot:
    """Tests for aggregate_snapshot."""

    def test_empty_roster(self) -> None:
        snapshot = aggregate_snapshot([], LOCATIONS)
        assert snapshot.total_headcount == 0
        assert snapshot.by_category == {"active": 0, "trainee": 0}
        assert snapshot.by_role == {}
        assert snapshot.by_location == {}

    def test_counts_by_category(self) -> None:
        roster = [
            _person(1, category="active"),
            _person(2, category="active"),
            _person(3, category="trainee"),
        ]
        snapshot = aggregate_snapshot(roster, LOCATIONS)
        assert snapshot.by_category == {"active": 2, "trainee": 1}

    def test_unrecognised_category_is_ignored(self) -> None:
        roster = [_person(1, category="active"), _person(2, category="contractor")]
        snapshot = aggregate_snapshot(roster, LOCATIONS)
        assert snapshot.by_category == {"active": 1, "trainee": 0}
        assert snapshot.total_headcount == 2

    def test_roles_are_open_ended(self) -> None:
        roster = [
            _person(1, role="trainer"),
            _person(2, role="advisor"),
            _person(3, role="advisor"),
            _person(4, role="workforce_planner"),
        ]
        snapshot = aggregate_snapshot(roster, LOCATIONS)
        assert snapshot.by_role == {"trainer": 1, "advisor": 2, "workforce_planner": 1}

    def test_missing_location_is_unassigned(self) -> None:
        snapshot = aggregate_snapshot([_person(1, location_id=None)], LOCATIONS)
        assert snapshot.by_location == {UNASSIGNED_LOCATION: 1}

    def test_unresolved_location_is_unknown(self) -> None:
        snapshot = aggregate_snapshot([_person(1, location_id=99)], LOCATIONS)
        assert snapshot.by_location == {UNKNOWN_LOCATION: 1}

    def test_resolved_locations_use_names(self) -> None:
        roster = [
            _person(1, location_id=1),
            _person(2, location_id=2),
            _person(3, location_id=2),
            _person(4, location_id=None),
            _person(5, location_id=42),
        ]
        snapshot = aggregate_snapshot(roster, LOCATIONS)
        assert snapshot.by_location == {"Pune": 1, "Manila": 2, "Unassigned": 1, "Unknown": 1}

    @pytest.mark.parametrize("size", [1, 7, 30])
    def test_views_partition_the_roster(self, size: int) -> None:
        roster = [
            _person(
                i,
                role=("trainer", "advisor", "team_lead")[i % 3],
                category=("active", "trainee")[i % 2],
                location_id=(1, 2, None, 77)[i % 4],
            )
            for i in range(size)
        ]
        _assert_partitions(aggregate_snapshot(roster, LOCATIONS), size)

    def test_to_dict_uses_wire_keys(self) -> None:
        snapshot = aggregate_snapshot([_person(1)], LOCATIONS)
        assert snapshot.to_dict() == {
            "totalHeadcount": 1,
            "byCategory": {"active": 1, "trainee": 0},
            "byRole": {"advisor": 1},
            "byLocation": {"Pune": 1},
        }
