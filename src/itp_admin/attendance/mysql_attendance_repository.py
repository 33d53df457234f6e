from __future__ import annotations

from datetime import date
from typing import Any, Dict, Sequence

from ..core.enums import TrainingAttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, plain_values
from .model import AttendanceRecord
from .repository import AttendanceRepository

COLUMNS = (
    "session_id",
    "session_date",
    "session_type",
    "session_name",
    "player_id",
    "status",
    "late_minutes",
    "excuse_reason",
    "notes",
    "recorded_by",
)
_KEY = ("session_id", "player_id")


def _to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(row["attendance_id"]),
        session_id=row["session_id"],
        session_date=row["session_date"],
        session_type=row["session_type"],
        session_name=row.get("session_name"),
        player_id=int(row["player_id"]),
        status=TrainingAttendanceStatus(row["status"]),
        late_minutes=int(row["late_minutes"]) if row.get("late_minutes") is not None else None,
        excuse_reason=row.get("excuse_reason"),
        notes=row.get("notes"),
        recorded_by=int(row["recorded_by"]) if row.get("recorded_by") is not None else None,
        created_at=row.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_since(self, since: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM training_attendance WHERE session_date >= %s ORDER BY session_date DESC, created_at DESC",
                (since,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def upsert_records(self, records: Sequence[Dict[str, Any]]) -> int:
        if not records:
            return 0
        updates = ", ".join(f"{c}=VALUES({c})" for c in COLUMNS if c not in _KEY)
        sql = (
            f"INSERT INTO training_attendance({', '.join(COLUMNS)}) "
            f"VALUES({', '.join(['%s'] * len(COLUMNS))}) "
            f"ON DUPLICATE KEY UPDATE {updates}"
        )
        rows = [tuple(plain_values(r).get(c) for c in COLUMNS) for r in records]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(sql, rows)
        return len(rows)
