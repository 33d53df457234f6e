from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Tuple

from ..core.enums import EventType, RecurrenceRule


@dataclass(frozen=True)
class Attendee:
    player_id: int
    status: str = "pending"
    player_name: Optional[str] = None


@dataclass(frozen=True)
class CalendarEvent:
    """A stored event row (series head, series instance or one-off)."""

    event_id: int
    title: str
    date: date
    type: EventType
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    description: Optional[str] = None
    location: Optional[str] = None
    all_day: bool = False
    is_mandatory: bool = False
    is_recurring: bool = False
    recurrence_rule: Optional[RecurrenceRule] = None
    recurrence_days: Tuple[str, ...] = ()
    recurrence_end_date: Optional[date] = None
    parent_event_id: Optional[int] = None
    attendees: Tuple[Attendee, ...] = ()
    created_at: Optional[datetime] = None

    @property
    def series_head_id(self) -> Optional[int]:
        if self.parent_event_id is not None:
            return self.parent_event_id
        return self.event_id if self.is_recurring else None


@dataclass(frozen=True)
class NewEvent:
    title: str
    date: date
    type: EventType
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    description: Optional[str] = None
    location: Optional[str] = None
    all_day: bool = False
    is_mandatory: bool = False
    is_recurring: bool = False
    recurrence_rule: Optional[RecurrenceRule] = None
    recurrence_days: Tuple[str, ...] = ()
    recurrence_end_date: Optional[date] = None
    parent_event_id: Optional[int] = None


@dataclass(frozen=True)
class FeedEvent:
    """Anything drawn on the calendar: stored events plus trial, prospect and medical entries."""

    id: str
    title: str
    date: date
    type: EventType
    source: str
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    all_day: bool = False
    location: Optional[str] = None
    description: Optional[str] = None
    event_id: Optional[int] = None
    parent_event_id: Optional[int] = None
    is_recurring: bool = False
    attendee_ids: Tuple[int, ...] = ()

    @property
    def is_timed(self) -> bool:
        return not self.all_day and self.start_time is not None


@dataclass(frozen=True)
class WellnessLog:
    player_id: int
    date: date


@dataclass(frozen=True)
class TrainingLoad:
    player_id: int
    date: date
    mobility_completed: bool = False
