from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_list
from .model import House, Resident, Room
from .repository import HousingRepository

_RESIDENT_SQL = """
    SELECT id, player_id, first_name, last_name, room_id, house_id, positions
    FROM players
    WHERE status IN ('active', 'pending')
"""


def _to_room(row: dict) -> Room:
    return Room(
        room_id=int(row["room_id"]),
        house_id=int(row["house_id"]),
        name=row["name"],
        capacity=int(row["capacity"]),
        floor=int(row["floor"]) if row.get("floor") is not None else None,
    )


def _to_resident(row: dict) -> Resident:
    return Resident(
        id=int(row["id"]),
        player_id=row["player_id"],
        full_name=f"{row['first_name']} {row['last_name']}".strip(),
        room_id=int(row["room_id"]) if row.get("room_id") is not None else None,
        house_id=int(row["house_id"]) if row.get("house_id") is not None else None,
        positions=tuple(load_json_list(row.get("positions"))),
    )


class MySQLHousingRepository(HousingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_houses(self) -> Sequence[House]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT house_id, name, address FROM houses ORDER BY name")
            return [House(house_id=int(r["house_id"]), name=r["name"], address=r.get("address")) for r in fetchall(cur)]

    def list_rooms(self) -> Sequence[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT room_id, house_id, name, capacity, floor FROM rooms ORDER BY house_id, name")
            return [_to_room(r) for r in fetchall(cur)]

    def get_room(self, room_id: int) -> Optional[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT room_id, house_id, name, capacity, floor FROM rooms WHERE room_id=%s", (room_id,))
            row = fetchone(cur)
            return _to_room(row) if row else None

    def list_residents(self) -> Sequence[Resident]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_RESIDENT_SQL + " ORDER BY last_name, first_name")
            return [_to_resident(r) for r in fetchall(cur)]

    def get_resident(self, id: int) -> Optional[Resident]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_RESIDENT_SQL + " AND id=%s", (id,))
            row = fetchone(cur)
            return _to_resident(row) if row else None

    def set_room(self, id: int, *, room_id: Optional[int], house_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if room_id is None:
                cur.execute("UPDATE players SET room_id=NULL, house_id=NULL WHERE id=%s", (id,))
            else:
                cur.execute("UPDATE players SET room_id=%s, house_id=%s WHERE id=%s", (room_id, house_id, id))
            return cur.rowcount > 0
