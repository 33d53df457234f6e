"""Month, week and day grids for the calendar page.

Weeks start on Sunday. Events are bucketed by date; timed events are also
bucketed by the hour of their start time. All-day and time-less events
never land in an hour row.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from ..common.datetime_utils import add_months
from ..common.formatting import format_hour
from ..core.constants import DAY_VIEW_FIRST_HOUR
from ..core.exceptions import ValidationError
from .model import FeedEvent

MONTH = "month"
WEEK = "week"
DAY = "day"
VIEW_MODES = (MONTH, WEEK, DAY)


@dataclass(frozen=True)
class DayCell:
    date: date
    in_current_month: bool
    is_today: bool
    is_selected: bool
    events: Sequence[FeedEvent]


@dataclass(frozen=True)
class HourRow:
    hour: int
    label: str
    events: Sequence[FeedEvent]


@dataclass(frozen=True)
class DayColumn:
    date: date
    is_today: bool
    all_day: Sequence[FeedEvent]
    hours: Sequence[HourRow]


def week_start(value: date) -> date:
    """Sunday on or before `value`."""
    return value - timedelta(days=(value.weekday() + 1) % 7)


def month_bounds(value: date) -> tuple[date, date]:
    first = value.replace(day=1)
    last = add_months(first, 1) - timedelta(days=1)
    return first, last


def visible_range(current: date, mode: str) -> tuple[date, date]:
    """First and last date drawn by a view."""
    if mode == MONTH:
        first, last = month_bounds(current)
        start = week_start(first)
        end = last + timedelta(days=(5 - last.weekday()) % 7)
        return start, end
    if mode == WEEK:
        start = week_start(current)
        return start, start + timedelta(days=6)
    if mode == DAY:
        return current, current
    raise ValidationError(f"Invalid view mode: {mode!r}")


def filter_by_range(events: Iterable[FeedEvent], start: date, end: date) -> List[FeedEvent]:
    return [e for e in events if start <= e.date <= end]


def _sorted_day(events: Iterable[FeedEvent]) -> List[FeedEvent]:
    # all-day first, then by start time
    return sorted(events, key=lambda e: (e.is_timed, e.start_time.isoformat() if e.is_timed else "", e.title))


def events_for_day(events: Iterable[FeedEvent], day: date) -> List[FeedEvent]:
    return _sorted_day(e for e in events if e.date == day)


def events_for_hour(events: Iterable[FeedEvent], day: date, hour: int) -> List[FeedEvent]:
    return [e for e in events if e.date == day and e.is_timed and e.start_time.hour == hour]


def all_day_events(events: Iterable[FeedEvent], day: date) -> List[FeedEvent]:
    return [e for e in events if e.date == day and not e.is_timed]


def month_grid(
    current: date,
    events: Sequence[FeedEvent],
    *,
    today: date,
    selected: Optional[date] = None,
) -> List[List[DayCell]]:
    start, end = visible_range(current, MONTH)
    weeks: List[List[DayCell]] = []
    day = start
    while day <= end:
        week = []
        for _ in range(7):
            week.append(
                DayCell(
                    date=day,
                    in_current_month=day.month == current.month and day.year == current.year,
                    is_today=day == today,
                    is_selected=selected is not None and day == selected,
                    events=events_for_day(events, day),
                )
            )
            day += timedelta(days=1)
        weeks.append(week)
    return weeks


def _day_column(day: date, events: Sequence[FeedEvent], hours: Iterable[int], *, today: date) -> DayColumn:
    return DayColumn(
        date=day,
        is_today=day == today,
        all_day=all_day_events(events, day),
        hours=[HourRow(hour=h, label=format_hour(h), events=events_for_hour(events, day, h)) for h in hours],
    )


def week_view(current: date, events: Sequence[FeedEvent], *, today: date) -> List[DayColumn]:
    start = week_start(current)
    return [_day_column(start + timedelta(days=i), events, range(24), today=today) for i in range(7)]


def day_hours() -> List[int]:
    return [(i + DAY_VIEW_FIRST_HOUR) % 24 for i in range(24)]


def day_view(current: date, events: Sequence[FeedEvent], *, today: date) -> DayColumn:
    return _day_column(current, events, day_hours(), today=today)


def navigate(current: date, mode: str, step: int) -> date:
    """Move back (step=-1) or forward (step=1) by one view."""
    if mode == MONTH:
        return add_months(current, step)
    if mode == WEEK:
        return current + timedelta(days=7 * step)
    if mode == DAY:
        return current + timedelta(days=step)
    raise ValidationError(f"Invalid view mode: {mode!r}")


def header_label(current: date, mode: str) -> str:
    if mode == MONTH:
        return f"{current.strftime('%B')} {current.year}"
    if mode == WEEK:
        start = week_start(current)
        end = start + timedelta(days=6)
        return f"{start.strftime('%b')} {start.day} - {end.strftime('%b')} {end.day}, {end.year}"
    if mode == DAY:
        return f"{current.strftime('%A')}, {current.strftime('%B')} {current.day}, {current.year}"
    raise ValidationError(f"Invalid view mode: {mode!r}")


def group_by_date(events: Iterable[FeedEvent]) -> Dict[date, List[FeedEvent]]:
    grouped: Dict[date, List[FeedEvent]] = {}
    for event in events:
        grouped.setdefault(event.date, []).append(event)
    return {d: _sorted_day(v) for d, v in sorted(grouped.items())}
