from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..calendar.model import CalendarEvent
from ..calendar.repository import CalendarRepository
from ..common.datetime_utils import now_local, parse_iso_date
from ..common.forms import parse_optional_int
from ..common.validators import optional_str, parse_enum
from ..core.enums import EventType, PlayerStatus, TrainingAttendanceStatus
from ..core.exceptions import ValidationError
from ..players.model import Player
from ..players.repository import PlayerRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

HISTORY_DAYS = 7

SESSION_TYPE_LABELS = {
    "team_training": "Team Training",
    "individual": "Individual Training",
    "gym": "Gym Session",
    "recovery": "Recovery",
    "match": "Match",
    "other": "Other",
}

# calendar events offered as "today's sessions"
SESSION_EVENT_TYPES = frozenset({EventType.TRAINING, EventType.TEAM_TRAINING, EventType.MATCH})


@dataclass(frozen=True)
class DayHistory:
    date: date
    session_names: Sequence[str]
    stats: Dict[str, int]
    records: Sequence[AttendanceRecord]


@dataclass(frozen=True)
class AttendancePage:
    today: date
    players: Sequence[Player]
    history: Sequence[DayHistory]
    week_stats: Dict[str, int]
    today_sessions: Sequence[CalendarEvent]


def empty_stats() -> Dict[str, int]:
    return {s.value: 0 for s in TrainingAttendanceStatus}


def count_statuses(records: Sequence[AttendanceRecord]) -> Dict[str, int]:
    stats = empty_stats()
    for r in records:
        stats[r.status.value] += 1
    return stats


def group_history(records: Sequence[AttendanceRecord]) -> List[DayHistory]:
    """Newest day first; each day lists its distinct session names."""
    grouped: Dict[date, List[AttendanceRecord]] = {}
    for r in records:
        grouped.setdefault(r.session_date, []).append(r)
    out = []
    for day in sorted(grouped, reverse=True):
        day_records = grouped[day]
        names = list(dict.fromkeys(r.session_name for r in day_records if r.session_name))
        out.append(DayHistory(date=day, session_names=names, stats=count_statuses(day_records), records=day_records))
    return out


def clean_record(entry: Dict[str, Any]) -> Dict[str, Any]:
    """Player status row from the form; late minutes and excuse only survive for their status."""
    player_id = parse_optional_int(entry.get("player_id"), "Player")
    if not player_id:
        raise ValidationError("Each record needs a player")
    status = parse_enum(TrainingAttendanceStatus, entry.get("status"), "attendance status")
    late_minutes = None
    if status == TrainingAttendanceStatus.LATE:
        late_minutes = parse_optional_int(entry.get("late_minutes"), "Late minutes")
        if late_minutes is not None and late_minutes < 0:
            raise ValidationError("Late minutes cannot be negative")
    excuse_reason = optional_str(entry.get("excuse_reason")) if status == TrainingAttendanceStatus.EXCUSED else None
    return {
        "player_id": player_id,
        "status": status,
        "late_minutes": late_minutes,
        "excuse_reason": excuse_reason,
        "notes": optional_str(entry.get("notes")),
    }


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        players: PlayerRepository,
        events: CalendarRepository,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._players = players
        self._events = events
        self._clock = clock

    def page(self) -> AttendancePage:
        today = self._clock().date()
        records = self._attendance.list_since(today - timedelta(days=HISTORY_DAYS))
        sessions = [e for e in self._events.list_events(today, today) if e.type in SESSION_EVENT_TYPES]
        sessions.sort(key=lambda e: e.start_time.isoformat() if e.start_time else "")
        return AttendancePage(
            today=today,
            players=self._players.list_players(status=PlayerStatus.ACTIVE),
            history=group_history(records),
            week_stats=count_statuses(records),
            today_sessions=sessions,
        )

    def save_session(self, data: Dict[str, Any], *, recorded_by: int) -> str:
        """Upsert one record per player for the session; returns the session id."""
        entries = data.get("records") or []
        if not entries:
            raise ValidationError("Record attendance for at least one player")

        session_type = optional_str(data.get("session_type")) or "team_training"
        if session_type not in SESSION_TYPE_LABELS:
            raise ValidationError(f"Invalid session type: {session_type!r}")
        session_date = parse_iso_date(data.get("session_date") or self._clock().date())
        session_id: Optional[str] = optional_str(data.get("session_id")) or str(uuid.uuid4())
        session_name = optional_str(data.get("session_name")) or SESSION_TYPE_LABELS[session_type]

        rows = []
        for entry in entries:
            row = clean_record(entry)
            row.update(
                session_id=session_id,
                session_date=session_date,
                session_type=session_type,
                session_name=session_name,
                recorded_by=recorded_by,
            )
            rows.append(row)

        count = self._attendance.upsert_records(rows)
        logger.info("Saved attendance for session %s (%s, %d players)", session_id, session_date, count)
        return session_id
