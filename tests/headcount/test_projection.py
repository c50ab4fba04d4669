"""Tests for the forward headcount projection."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.headcount.projection import (
    PROJECTION_HORIZON_DAYS,
    SAMPLE_INTERVAL_DAYS,
    ProjectionPoint,
    simulate_projection,
)

TODAY = date(2025, 3, 3)


def _day(offset: int) -> date:
    return TODAY + timedelta(days=offset)


class TestFlatProjection:
    """Scenario: no attrition and no incoming batches."""

    def test_weekly_samples_only(self) -> None:
        """Given 5 people and no events,
        When projecting 90 days,
        Then 13 weekly points (days 0..84) all read 5."""
        points = simulate_projection(5, {}, TODAY)

        assert len(points) == 13
        assert [p.date for p in points] == [_day(i) for i in range(0, 90, 7)]
        assert all(p.expected_headcount == 5 for p in points)

    def test_constants(self) -> None:
        assert PROJECTION_HORIZON_DAYS == 90
        assert SAMPLE_INTERVAL_DAYS == 7


class TestEventDrivenSamples:
    """Scenario: step changes appear on the day they happen."""

    def test_attrition_step(self) -> None:
        """Given 5 people, one leaving on day 10,
        Then day 10 reads 4 and every earlier sample reads 5."""
        points = simulate_projection(5, {_day(10): -1}, TODAY)
        by_date = {p.date: p.expected_headcount for p in points}

        assert by_date[_day(10)] == 4
        assert all(p.expected_headcount == 5 for p in points if p.date < _day(10))
        assert all(p.expected_headcount == 4 for p in points if p.date >= _day(10))
        assert len(points) == 14

    def test_delta_is_applied_before_sampling_on_a_weekly_day(self) -> None:
        points = simulate_projection(5, {_day(7): 3}, TODAY)
        day_7 = [p for p in points if p.date == _day(7)]
        assert day_7 == [ProjectionPoint(date=_day(7), expected_headcount=8)]

    def test_event_today_is_applied_at_offset_zero(self) -> None:
        points = simulate_projection(5, {TODAY: -2}, TODAY)
        assert points[0] == ProjectionPoint(date=TODAY, expected_headcount=3)

    def test_zero_delta_day_is_still_sampled(self) -> None:
        points = simulate_projection(5, {_day(3): 0}, TODAY)
        assert ProjectionPoint(date=_day(3), expected_headcount=5) in points

    def test_past_and_out_of_horizon_events_are_not_applied(self) -> None:
        points = simulate_projection(5, {_day(-4): -1, _day(90): 10, _day(200): -3}, TODAY)
        assert len(points) == 13
        assert all(p.expected_headcount == 5 for p in points)

    def test_last_day_of_horizon_is_included(self) -> None:
        points = simulate_projection(5, {_day(89): 1}, TODAY)
        assert points[-1] == ProjectionPoint(date=_day(89), expected_headcount=6)

    def test_points_are_in_date_order(self) -> None:
        points = simulate_projection(10, {_day(40): 2, _day(3): -1, _day(22): -1}, TODAY)
        assert [p.date for p in points] == sorted(p.date for p in points)


class TestNoClamping:
    def test_headcount_may_go_negative(self) -> None:
        points = simulate_projection(1, {_day(2): -3}, TODAY)
        assert points[-1].expected_headcount == -2


class TestParameters:
    def test_custom_horizon_and_interval(self) -> None:
        points = simulate_projection(2, {}, TODAY, horizon_days=10, sample_interval_days=5)
        assert [p.date for p in points] == [_day(0), _day(5)]

    def test_invalid_interval(self) -> None:
        with pytest.raises(ValueError):
            simulate_projection(2, {}, TODAY, sample_interval_days=0)

    def test_to_dict(self) -> None:
        point = ProjectionPoint(date=TODAY, expected_headcount=4)
        assert point.to_dict() == {"date": "2025-03-03", "expectedHeadcount": 4}
