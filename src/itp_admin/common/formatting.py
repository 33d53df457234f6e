"""Display helpers shared by the page payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import Union

from .datetime_utils import parse_iso_date

_STATUS_BADGES = {
    "active": "bg-green-100 text-green-800",
    "pending": "bg-yellow-100 text-yellow-800",
    "alumni": "bg-blue-100 text-blue-800",
    "cancelled": "bg-red-100 text-red-800",
    "valid": "bg-green-100 text-green-800",
    "expired": "bg-red-100 text-red-800",
    "expiring_soon": "bg-orange-100 text-orange-800",
    "completed": "bg-green-100 text-green-800",
    "in_progress": "bg-blue-100 text-blue-800",
    "scheduled": "bg-purple-100 text-purple-800",
}

_PRIORITY_BADGES = {
    "low": "bg-gray-100 text-gray-800",
    "medium": "bg-blue-100 text-blue-800",
    "high": "bg-orange-100 text-orange-800",
    "urgent": "bg-red-100 text-red-800",
}

DEFAULT_BADGE = "bg-gray-100 text-gray-800"


def format_date(value: Union[str, date, datetime]) -> str:
    """e.g. 'Mar 15, 2024'."""
    d = parse_iso_date(value)
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def format_time(value: str) -> str:
    """12-hour clock label for 'HH:MM[:SS]' or ISO timestamps; '' when unparseable."""
    if not value:
        return ""
    text = value.split("T", 1)[1] if "T" in value else value
    parts = text.split(":")
    if len(parts) < 2 or not parts[0].isdigit() or not parts[1][:2].isdigit():
        return ""
    hour = int(parts[0])
    minutes = parts[1][:2]
    suffix = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minutes} {suffix}"


def format_hour(hour: int) -> str:
    if hour == 0:
        return "12 AM"
    if hour == 12:
        return "12 PM"
    return f"{hour} AM" if hour < 12 else f"{hour - 12} PM"


def get_initials(name: str) -> str:
    return "".join(part[0] for part in name.split() if part).upper()[:2]


def status_badge(status) -> str:
    return _STATUS_BADGES.get(getattr(status, "value", status), DEFAULT_BADGE)


def priority_badge(priority) -> str:
    return _PRIORITY_BADGES.get(getattr(priority, "value", priority), DEFAULT_BADGE)


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    i = 0
    scaled = float(size)
    while scaled >= 1024 and i < len(units) - 1:
        scaled /= 1024
        i += 1
    value = round(scaled, 2)
    return f"{value:g} {units[i]}"


def full_name(first_name: str, last_name: str) -> str:
    return f"{first_name} {last_name}".strip()
