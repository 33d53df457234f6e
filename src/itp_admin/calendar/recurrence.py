"""Dates of the instances of a recurring event.

The start date itself is the series head and is never part of the result.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List, Sequence

from ..common.datetime_utils import add_months
from ..core.enums import RecurrenceRule
from ..core.exceptions import ValidationError

WEEKDAY_NUMBERS = {"mon": 0, "tue": 1, "wed": 2, "thu": 3, "fri": 4, "sat": 5, "sun": 6}


def weekday_numbers(days: Iterable[str]) -> set[int]:
    out = set()
    for day in days:
        key = str(day).strip().lower()[:3]
        if key not in WEEKDAY_NUMBERS:
            raise ValidationError(f"Invalid weekday: {day!r}")
        out.add(WEEKDAY_NUMBERS[key])
    return out


def generate_recurrence_dates(
    start: date,
    rule: RecurrenceRule,
    end: date,
    days: Sequence[str] = (),
) -> List[date]:
    if end < start:
        raise ValidationError("Recurrence end date must be on or after the start date")

    dates: List[date] = []
    if rule == RecurrenceRule.CUSTOM:
        selected = weekday_numbers(days)
        if not selected:
            raise ValidationError("Select at least one weekday for a custom recurrence")
        current = start + timedelta(days=1)
        while current <= end:
            if current.weekday() in selected:
                dates.append(current)
            current += timedelta(days=1)
        return dates

    if rule == RecurrenceRule.MONTHLY:
        # offset from the start so a 31st does not drift to the 28th after February
        step = 1
        current = add_months(start, step)
        while current <= end:
            dates.append(current)
            step += 1
            current = add_months(start, step)
        return dates

    delta = timedelta(days=1) if rule == RecurrenceRule.DAILY else timedelta(days=7)
    current = start + delta
    while current <= end:
        dates.append(current)
        current += delta
    return dates
