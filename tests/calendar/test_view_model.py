from __future__ import annotations

from datetime import date, time

import pytest

from itp_admin.calendar import view_model
from itp_admin.calendar.model import FeedEvent
from itp_admin.core.enums import EventType
from itp_admin.core.exceptions import ValidationError


def _event(id, day, start=None, all_day=False, title="Event"):
    return FeedEvent(id=id, title=title, date=day, type=EventType.OTHER, source="event", start_time=start, all_day=all_day)


def test_week_starts_on_sunday():
    assert view_model.week_start(date(2024, 3, 13)) == date(2024, 3, 10)
    assert view_model.week_start(date(2024, 3, 10)) == date(2024, 3, 10)


def test_visible_range_for_month_covers_full_weeks():
    start, end = view_model.visible_range(date(2024, 3, 15), view_model.MONTH)
    assert start == date(2024, 2, 25)
    assert end == date(2024, 4, 6)
    assert start.weekday() == 6 and end.weekday() == 5


def test_month_grid_marks_cells():
    events = [_event("1", date(2024, 3, 15), time(10, 0)), _event("2", date(2024, 3, 15), all_day=True)]
    grid = view_model.month_grid(date(2024, 3, 1), events, today=date(2024, 3, 15), selected=date(2024, 3, 20))

    assert len(grid) == 6
    assert all(len(week) == 7 for week in grid)
    cells = {c.date: c for week in grid for c in week}
    assert cells[date(2024, 2, 25)].in_current_month is False
    assert cells[date(2024, 3, 15)].is_today is True
    assert cells[date(2024, 3, 20)].is_selected is True
    # all-day entries sort ahead of timed ones
    assert [e.id for e in cells[date(2024, 3, 15)].events] == ["2", "1"]


def test_week_view_buckets_by_hour():
    events = [
        _event("1", date(2024, 3, 12), time(9, 30)),
        _event("2", date(2024, 3, 12), all_day=True),
        _event("3", date(2024, 3, 12)),
    ]
    columns = view_model.week_view(date(2024, 3, 12), events, today=date(2024, 3, 15))

    assert [c.date for c in columns][0] == date(2024, 3, 10)
    tuesday = columns[2]
    assert [e.id for e in tuesday.hours[9].events] == ["1"]
    assert sorted(e.id for e in tuesday.all_day) == ["2", "3"]
    assert sum(len(h.events) for h in tuesday.hours) == 1


def test_day_view_starts_at_seven():
    column = view_model.day_view(date(2024, 3, 12), [], today=date(2024, 3, 12))
    assert column.hours[0].hour == 7
    assert column.hours[0].label == "7 AM"
    assert column.hours[-1].hour == 6
    assert len(column.hours) == 24


def test_navigate_and_header():
    assert view_model.navigate(date(2024, 1, 31), view_model.MONTH, 1) == date(2024, 2, 29)
    assert view_model.navigate(date(2024, 3, 12), view_model.WEEK, -1) == date(2024, 3, 5)
    assert view_model.navigate(date(2024, 3, 12), view_model.DAY, 1) == date(2024, 3, 13)
    assert view_model.header_label(date(2024, 3, 12), view_model.MONTH) == "March 2024"
    assert view_model.header_label(date(2024, 3, 12), view_model.WEEK) == "Mar 10 - Mar 16, 2024"
    assert view_model.header_label(date(2024, 3, 12), view_model.DAY) == "Tuesday, March 12, 2024"
    with pytest.raises(ValidationError):
        view_model.navigate(date(2024, 3, 12), "year", 1)


def test_group_by_date_sorts_days_and_events():
    grouped = view_model.group_by_date(
        [
            _event("b", date(2024, 3, 13), time(8, 0)),
            _event("a", date(2024, 3, 12), time(18, 0)),
            _event("c", date(2024, 3, 12), time(7, 0)),
        ]
    )
    assert list(grouped) == [date(2024, 3, 12), date(2024, 3, 13)]
    assert [e.id for e in grouped[date(2024, 3, 12)]] == ["c", "a"]
