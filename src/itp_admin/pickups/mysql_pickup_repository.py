from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import PickupLocationType, PickupStatus, PickupTransport
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, insert_row, normalize_mysql_time
from .model import Pickup
from .repository import PickupRepository

COLUMNS = (
    "player_id",
    "assigned_staff_id",
    "location_type",
    "location_name",
    "arrival_date",
    "arrival_time",
    "transport_type",
    "flight_train_number",
    "has_family",
    "family_count",
    "family_notes",
    "status",
    "notes",
    "calendar_event_id",
)

_SELECT = """
    SELECT k.*, CONCAT(p.first_name, ' ', p.last_name) AS player_name, a.full_name AS staff_name
    FROM pickups k
    LEFT JOIN players p ON p.id = k.player_id
    LEFT JOIN accounts a ON a.account_id = k.assigned_staff_id
"""


def _to_pickup(row: dict) -> Pickup:
    return Pickup(
        pickup_id=int(row["pickup_id"]),
        player_id=int(row["player_id"]),
        assigned_staff_id=row.get("assigned_staff_id"),
        location_type=PickupLocationType(row["location_type"]),
        location_name=row["location_name"],
        arrival_date=row["arrival_date"],
        arrival_time=normalize_mysql_time(row.get("arrival_time")),
        transport_type=PickupTransport(row.get("transport_type") or PickupTransport.WARUBI_CAR),
        flight_train_number=row.get("flight_train_number"),
        has_family=bool(row.get("has_family")),
        family_count=int(row.get("family_count") or 0),
        family_notes=row.get("family_notes"),
        status=PickupStatus(row.get("status") or PickupStatus.SCHEDULED),
        notes=row.get("notes"),
        calendar_event_id=row.get("calendar_event_id"),
        player_name=row.get("player_name"),
        staff_name=row.get("staff_name"),
        created_at=row.get("created_at"),
    )


class MySQLPickupRepository(PickupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_pickups(self) -> Sequence[Pickup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY k.arrival_date ASC, k.arrival_time ASC")
            return [_to_pickup(r) for r in fetchall(cur)]

    def get_pickup(self, pickup_id: int) -> Optional[Pickup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE k.pickup_id=%s", (pickup_id,))
            row = fetchone(cur)
            return _to_pickup(row) if row else None

    def create_pickup(self, values: Dict[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "pickups", values, COLUMNS)

    def update_pickup(self, pickup_id: int, changes: Dict[str, Any]) -> bool:
        set_clause, params = build_update(changes, COLUMNS)
        if not set_clause:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE pickups SET {set_clause} WHERE pickup_id=%s", (*params, pickup_id))
            return cur.rowcount > 0

    def delete_pickup(self, pickup_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM pickups WHERE pickup_id=%s", (pickup_id,))
            return cur.rowcount > 0
