from __future__ import annotations

from dataclasses import asdict, replace
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import EventType, RecurrenceRule
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    build_update,
    db_cursor,
    dump_json_list,
    fetchall,
    fetchone,
    in_clause,
    insert_row,
    load_json_list,
    normalize_mysql_time,
)
from .model import Attendee, CalendarEvent, NewEvent, TrainingLoad, WellnessLog
from .repository import CalendarRepository

COLUMNS = (
    "title",
    "description",
    "date",
    "start_time",
    "end_time",
    "type",
    "location",
    "all_day",
    "is_mandatory",
    "is_recurring",
    "recurrence_rule",
    "recurrence_days",
    "recurrence_end_date",
    "parent_event_id",
)


def _encode(values: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(values)
    if "recurrence_days" in values:
        days = values["recurrence_days"]
        values["recurrence_days"] = dump_json_list(days) if days else None
    for flag in ("all_day", "is_mandatory", "is_recurring"):
        if flag in values:
            values[flag] = int(bool(values[flag]))
    return values


def _to_event(row: dict) -> CalendarEvent:
    return CalendarEvent(
        event_id=int(row["event_id"]),
        title=row["title"],
        date=row["date"],
        type=EventType(row["type"]),
        start_time=normalize_mysql_time(row.get("start_time")),
        end_time=normalize_mysql_time(row.get("end_time")),
        description=row.get("description"),
        location=row.get("location"),
        all_day=bool(row.get("all_day")),
        is_mandatory=bool(row.get("is_mandatory")),
        is_recurring=bool(row.get("is_recurring")),
        recurrence_rule=RecurrenceRule(row["recurrence_rule"]) if row.get("recurrence_rule") else None,
        recurrence_days=tuple(load_json_list(row.get("recurrence_days"))),
        recurrence_end_date=row.get("recurrence_end_date"),
        parent_event_id=int(row["parent_event_id"]) if row.get("parent_event_id") is not None else None,
        created_at=row.get("created_at"),
    )


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _with_attendees(self, cur, events: List[CalendarEvent]) -> List[CalendarEvent]:
        if not events:
            return events
        placeholders, params = in_clause([e.event_id for e in events])
        cur.execute(
            f"""
            SELECT a.event_id, a.player_id, a.status, CONCAT(p.first_name, ' ', p.last_name) AS player_name
            FROM event_attendees a
            LEFT JOIN players p ON p.id = a.player_id
            WHERE a.event_id IN ({placeholders})
            ORDER BY p.last_name, p.first_name
            """,
            params,
        )
        by_event: Dict[int, List[Attendee]] = {}
        for row in fetchall(cur):
            by_event.setdefault(int(row["event_id"]), []).append(
                Attendee(player_id=int(row["player_id"]), status=row["status"], player_name=row.get("player_name"))
            )
        return [replace(e, attendees=tuple(by_event.get(e.event_id, ()))) for e in events]

    def list_events(self, start: date, end: date) -> Sequence[CalendarEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM events WHERE date BETWEEN %s AND %s ORDER BY date, start_time",
                (start, end),
            )
            events = [_to_event(r) for r in fetchall(cur)]
            return self._with_attendees(cur, events)

    def get_event(self, event_id: int) -> Optional[CalendarEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM events WHERE event_id=%s", (event_id,))
            row = fetchone(cur)
            if not row:
                return None
            return self._with_attendees(cur, [_to_event(row)])[0]

    def list_series(self, head_id: int) -> Sequence[CalendarEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM events WHERE event_id=%s OR parent_event_id=%s ORDER BY date, event_id",
                (head_id, head_id),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def create_events(self, events: Sequence[NewEvent]) -> List[int]:
        ids: List[int] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for event in events:
                ids.append(insert_row(cur, "events", _encode(asdict(event)), COLUMNS))
        return ids

    def update_events(self, event_ids: Sequence[int], changes: Dict[str, Any]) -> int:
        set_clause, params = build_update(_encode(changes), COLUMNS)
        if not set_clause or not event_ids:
            return 0
        placeholders, id_params = in_clause(event_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE events SET {set_clause} WHERE event_id IN ({placeholders})", (*params, *id_params))
            return cur.rowcount

    def reparent(self, old_parent_id: int, new_parent_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE events SET parent_event_id=%s WHERE parent_event_id=%s AND event_id<>%s",
                (new_parent_id, old_parent_id, new_parent_id),
            )
            return cur.rowcount

    def delete_events(self, event_ids: Sequence[int]) -> int:
        if not event_ids:
            return 0
        placeholders, params = in_clause(event_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM events WHERE event_id IN ({placeholders})", params)
            return cur.rowcount

    def add_attendees(self, event_ids: Sequence[int], player_ids: Sequence[int]) -> None:
        rows = [(e, p, "pending") for e in event_ids for p in player_ids]
        if not rows:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany("INSERT IGNORE INTO event_attendees(event_id, player_id, status) VALUES(%s,%s,%s)", rows)

    def replace_attendees(self, event_ids: Sequence[int], player_ids: Sequence[int]) -> None:
        if not event_ids:
            return
        placeholders, params = in_clause(event_ids)
        rows = [(e, p, "pending") for e in event_ids for p in player_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM event_attendees WHERE event_id IN ({placeholders})", params)
            if rows:
                cur.executemany("INSERT INTO event_attendees(event_id, player_id, status) VALUES(%s,%s,%s)", rows)

    def list_wellness_logs(self, day: date) -> Sequence[WellnessLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT player_id, date FROM wellness_logs WHERE date=%s", (day,))
            return [WellnessLog(player_id=int(r["player_id"]), date=r["date"]) for r in fetchall(cur)]

    def list_training_loads(self, day: date) -> Sequence[TrainingLoad]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT player_id, date, mobility_completed FROM training_loads WHERE date=%s", (day,))
            return [
                TrainingLoad(
                    player_id=int(r["player_id"]),
                    date=r["date"],
                    mobility_completed=bool(r.get("mobility_completed")),
                )
                for r in fetchall(cur)
            ]
