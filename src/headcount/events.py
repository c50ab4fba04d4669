"""Future headcount events for a process.

Merges two independent event streams into one date-ordered map of signed
deltas:

- attrition: each person with a last working day removes one head
- onboarding: each batch handover adds its capacity
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from src.headcount.gateways import RosterEntry, ScheduledHandover

HeadcountDeltas = dict[date, int]


def extract_deltas(
    roster: Iterable[RosterEntry],
    handovers: Iterable[ScheduledHandover],
) -> HeadcountDeltas:
    """Build the date -> net headcount change map.

    Events falling on the same date are summed into one entry, so an
    attrition and a handover on the same day net out. A handover with no
    capacity counts as zero but still marks its date as an event day.

    Returns:
        Dict keyed by calendar date, iterated in ascending date order.
    """
    deltas: dict[date, int] = {}

    for person in roster:
        if person.last_working_day is None:
            continue
        day = as_calendar_date(person.last_working_day)
        deltas[day] = deltas.get(day, 0) - 1

    for handover in handovers:
        day = as_calendar_date(handover.handover_date)
        deltas[day] = deltas.get(day, 0) + (handover.capacity_limit or 0)

    return dict(sorted(deltas.items()))


def as_calendar_date(value: date | datetime) -> date:
    # datetime is a date subclass, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value
