from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Optional, Union

from ..core.exceptions import ValidationError


def parse_iso_date(value: Union[str, date, datetime]) -> date:
    """Parse YYYY-MM-DD (or an ISO timestamp) into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).split("T")[0], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_optional_date(value) -> Optional[date]:
    if value in (None, ""):
        return None
    return parse_iso_date(value)


def parse_time_of_day(value: Union[str, time, None]) -> Optional[time]:
    """Accept HH:MM, HH:MM:SS or an ISO timestamp and return the time part."""
    if value is None or isinstance(value, time):
        return value
    text = str(value).strip()
    if not text:
        return None
    if "T" in text:
        text = text.split("T", 1)[1]
    text = text[:8]
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time: {value!r} (expected HH:MM)")


def add_months(value: date, months: int) -> date:
    """Same day in a later month, clamped to the month's last day."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def days_until(target: Union[str, date], *, today: Optional[date] = None) -> int:
    today = today or date.today()
    return (parse_iso_date(target) - today).days


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def calculate_age(date_of_birth: Union[str, date, None], *, today: Optional[date] = None) -> Optional[int]:
    if not date_of_birth:
        return None
    dob = parse_iso_date(date_of_birth)
    today = today or date.today()
    return today.year - dob.year - ((today.month, today.day) < (dob.month, dob.day))
