from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Sequence

from ..common.datetime_utils import now_local, parse_iso_date, parse_optional_date, parse_time_of_day
from ..common.forms import parse_bool
from ..common.validators import optional_str, parse_enum, require_non_empty
from ..core.enums import EventType, PlayerStatus, RecurrenceRule, SeriesScope
from ..core.exceptions import NotFoundError, ValidationError
from ..medical.repository import MedicalRepository
from ..players.repository import PlayerRepository
from ..prospects.repository import ProspectRepository
from ..trials.repository import PlayerTrialRepository
from . import view_model
from .compliance import ComplianceRow, compliance_rows
from .derived import merge_feed
from .model import CalendarEvent, FeedEvent, NewEvent
from .recurrence import generate_recurrence_dates, weekday_numbers
from .repository import CalendarRepository

logger = logging.getLogger(__name__)

# fields a series-wide edit copies onto every member
SERIES_FIELDS = ("title", "type", "start_time", "end_time", "location", "description", "all_day")


@dataclass(frozen=True)
class CalendarPage:
    mode: str
    current: date
    selected: date
    header: str
    start: date
    end: date
    events: Sequence[FeedEvent]
    grid: Any
    compliance: Sequence[ComplianceRow]
    players: Sequence[Any]


def parse_player_ids(value) -> List[int]:
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(",")
    ids: List[int] = []
    for item in value:
        try:
            player_id = int(item)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid player id: {item!r}")
        if player_id not in ids:
            ids.append(player_id)
    return ids


def parse_recurrence_days(value) -> tuple:
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    days = [str(d).strip().lower()[:3] for d in value if str(d).strip()]
    weekday_numbers(days)
    return tuple(dict.fromkeys(days))


def _event_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if "title" in data:
        out["title"] = require_non_empty(data["title"], "Title")
    if "date" in data:
        out["date"] = parse_iso_date(require_non_empty(str(data["date"] or ""), "Date"))
    if "type" in data:
        out["type"] = parse_enum(EventType, data["type"] or EventType.OTHER, "event type")
    for name in ("start_time", "end_time"):
        if name in data:
            out[name] = parse_time_of_day(data[name])
    for name in ("location", "description"):
        if name in data:
            out[name] = optional_str(data[name])
    for name in ("all_day", "is_mandatory"):
        if name in data:
            out[name] = parse_bool(data[name])
    return out


def _check_times(values: Dict[str, Any]) -> None:
    if values.get("all_day"):
        values["start_time"] = None
        values["end_time"] = None
        return
    start, end = values.get("start_time"), values.get("end_time")
    if start is None:
        raise ValidationError("Start time is required unless the event is all day")
    if end is not None and end <= start:
        raise ValidationError("End time must be after start time")


class CalendarService:
    def __init__(
        self,
        events: CalendarRepository,
        *,
        players: PlayerRepository,
        trials: PlayerTrialRepository,
        prospects: ProspectRepository,
        medical: MedicalRepository,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._players = players
        self._trials = trials
        self._prospects = prospects
        self._medical = medical
        self._clock = clock

    # loader

    def feed(self, start: date, end: date) -> List[FeedEvent]:
        return merge_feed(
            self._events.list_events(start, end),
            trials=self._trials.list_trials(),
            prospects=self._prospects.list_prospects(),
            appointments=self._medical.list_appointments(),
            start=start,
            end=end,
        )

    def page(self, *, mode: str = view_model.MONTH, current=None, selected=None) -> CalendarPage:
        today = self._clock().date()
        current = parse_optional_date(current) or today
        selected = parse_optional_date(selected) or current
        start, end = view_model.visible_range(current, mode)
        feed_start, feed_end = min(start, selected), max(end, selected)
        events = self.feed(feed_start, feed_end)
        visible = view_model.filter_by_range(events, start, end)

        if mode == view_model.MONTH:
            grid = view_model.month_grid(current, visible, today=today, selected=selected)
        elif mode == view_model.WEEK:
            grid = view_model.week_view(current, visible, today=today)
        else:
            grid = view_model.day_view(current, visible, today=today)

        players = self._players.list_players(status=PlayerStatus.ACTIVE)
        rows = compliance_rows(
            selected,
            events,
            players,
            self._events.list_wellness_logs(selected),
            self._events.list_training_loads(selected),
        )
        return CalendarPage(
            mode=mode,
            current=current,
            selected=selected,
            header=view_model.header_label(current, mode),
            start=start,
            end=end,
            events=visible,
            grid=grid,
            compliance=rows,
            players=players,
        )

    # writes

    def get_event(self, event_id: int) -> CalendarEvent:
        event = self._events.get_event(int(event_id))
        if not event:
            raise NotFoundError("Event not found")
        return event

    def create_event(self, data: Dict[str, Any]) -> List[int]:
        """Insert the event (and its instances when recurring); returns the new ids, head first."""
        if not data.get("title"):
            raise ValidationError("Title is required")
        if not data.get("date"):
            raise ValidationError("Date is required")
        values = _event_fields(data)
        values.setdefault("type", EventType.OTHER)
        _check_times(values)
        attendee_ids = parse_player_ids(data.get("player_ids") or data.get("attendees"))

        rule = None
        if data.get("recurrence_rule"):
            rule = parse_enum(RecurrenceRule, data["recurrence_rule"], "recurrence rule")

        if rule is None:
            ids = self._events.create_events([NewEvent(**values)])
            self._events.add_attendees(ids, attendee_ids)
            logger.info("Event %s created: %s on %s", ids[0], values["title"], values["date"])
            return ids

        end = parse_optional_date(data.get("recurrence_end_date"))
        if end is None:
            raise ValidationError("Recurrence end date is required for a repeating event")
        days = parse_recurrence_days(data.get("recurrence_days")) if rule == RecurrenceRule.CUSTOM else ()
        dates = generate_recurrence_dates(values["date"], rule, end, days)

        head = NewEvent(
            **values,
            is_recurring=True,
            recurrence_rule=rule,
            recurrence_days=days,
            recurrence_end_date=end,
        )
        head_id = self._events.create_events([head])[0]
        instance_values = {k: v for k, v in values.items() if k != "date"}
        instance_ids = self._events.create_events(
            [NewEvent(date=d, parent_event_id=head_id, **instance_values) for d in dates]
        )
        ids = [head_id, *instance_ids]
        self._events.add_attendees(ids, attendee_ids)
        logger.info("Series %s created: %s, %s until %s (%d instances)", head_id, values["title"], rule.value, end, len(instance_ids))
        return ids

    def _scope_members(self, event: CalendarEvent, scope: SeriesScope) -> List[CalendarEvent]:
        head_id = event.series_head_id
        if head_id is None or scope == SeriesScope.THIS:
            return [event]
        series = list(self._events.list_series(head_id))
        if scope == SeriesScope.FOLLOWING:
            return [e for e in series if e.date >= event.date]
        return series

    def update_event(self, event_id: int, data: Dict[str, Any], *, scope=SeriesScope.THIS) -> int:
        scope = parse_enum(SeriesScope, scope or SeriesScope.THIS, "scope")
        event = self.get_event(event_id)
        changes = _event_fields(data)
        attendees_given = "player_ids" in data or "attendees" in data
        if not changes and not attendees_given:
            raise ValidationError("Nothing to update")

        merged = {
            "all_day": event.all_day,
            "start_time": event.start_time,
            "end_time": event.end_time,
        }
        merged.update({k: v for k, v in changes.items() if k in merged})
        if {"all_day", "start_time", "end_time"} & set(changes):
            _check_times(merged)
            changes.update(merged)

        members = self._scope_members(event, scope)
        ids = [m.event_id for m in members]
        if event.series_head_id is not None and scope != SeriesScope.THIS:
            # members keep their own dates
            changes = {k: v for k, v in changes.items() if k in SERIES_FIELDS or k == "is_mandatory"}
        if changes:
            self._events.update_events(ids, changes)
        if attendees_given:
            self._events.replace_attendees(ids, parse_player_ids(data.get("player_ids") or data.get("attendees")))
        logger.info("Event %s updated (%s, %d events)", event.event_id, scope.value, len(ids))
        return len(ids)

    def delete_event(self, event_id: int, *, scope=SeriesScope.THIS) -> int:
        scope = parse_enum(SeriesScope, scope or SeriesScope.THIS, "scope")
        event = self.get_event(event_id)
        head_id = event.series_head_id
        is_head = head_id == event.event_id

        if head_id is None:
            deleted = self._events.delete_events([event.event_id])
        elif scope == SeriesScope.ALL or (scope == SeriesScope.FOLLOWING and is_head):
            deleted = self._events.delete_events([e.event_id for e in self._events.list_series(head_id)])
        elif scope == SeriesScope.FOLLOWING:
            members = self._scope_members(event, scope)
            deleted = self._events.delete_events([m.event_id for m in members])
            self._events.update_events([head_id], {"recurrence_end_date": event.date - timedelta(days=1)})
        elif is_head:
            deleted = self._delete_head_only(event)
        else:
            deleted = self._events.delete_events([event.event_id])

        logger.info("Deleted %d event(s) from %s (%s)", deleted, event.event_id, scope.value)
        return deleted

    def _delete_head_only(self, head: CalendarEvent) -> int:
        # instances cascade with their head, so the earliest one takes over first
        instances = [e for e in self._events.list_series(head.event_id) if e.event_id != head.event_id]
        if instances:
            successor = instances[0]
            self._events.update_events(
                [successor.event_id],
                {
                    "is_recurring": True,
                    "recurrence_rule": head.recurrence_rule,
                    "recurrence_days": head.recurrence_days,
                    "recurrence_end_date": head.recurrence_end_date,
                    "parent_event_id": None,
                },
            )
            self._events.reparent(head.event_id, successor.event_id)
            logger.info("Event %s is now the head of series %s", successor.event_id, head.event_id)
        return self._events.delete_events([head.event_id])
