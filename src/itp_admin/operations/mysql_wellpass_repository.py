from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import WellPassStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, insert_row
from .model import WellPassMembership
from .repository import WellPassRepository

COLUMNS = ("player_id", "membership_number", "status", "start_date", "end_date", "notes")

_SELECT = """
    SELECT w.*, CONCAT(p.first_name, ' ', p.last_name) AS player_name
    FROM wellpass_memberships w
    LEFT JOIN players p ON p.id = w.player_id
"""


def _to_membership(row: dict) -> WellPassMembership:
    return WellPassMembership(
        membership_id=int(row["membership_id"]),
        player_id=int(row["player_id"]),
        membership_number=row.get("membership_number"),
        status=WellPassStatus(row["status"]),
        start_date=row["start_date"],
        end_date=row.get("end_date"),
        notes=row.get("notes"),
        player_name=row.get("player_name"),
        created_at=row.get("created_at"),
    )


class MySQLWellPassRepository(WellPassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_memberships(self) -> Sequence[WellPassMembership]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY w.created_at DESC")
            return [_to_membership(r) for r in fetchall(cur)]

    def get_membership(self, membership_id: int) -> Optional[WellPassMembership]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE w.membership_id=%s", (membership_id,))
            row = fetchone(cur)
            return _to_membership(row) if row else None

    def create_membership(self, values: Dict[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "wellpass_memberships", values, COLUMNS)

    def update_membership(self, membership_id: int, changes: Dict[str, Any]) -> bool:
        set_clause, params = build_update(changes, COLUMNS)
        if not set_clause:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE wellpass_memberships SET {set_clause} WHERE membership_id=%s", (*params, membership_id))
            return cur.rowcount > 0

    def delete_membership(self, membership_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM wellpass_memberships WHERE membership_id=%s", (membership_id,))
            return cur.rowcount > 0
