from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import PlayerStatus, WhereaboutsStatus
from ..core.exceptions import DuplicateKeyError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    build_update,
    db_cursor,
    dump_json_dict,
    dump_json_list,
    fetchall,
    fetchone,
    is_duplicate_key,
    load_json_dict,
    load_json_list,
)
from .model import NewPlayer, Player
from .repository import PlayerRepository

_COLUMNS = (
    "id, player_id, account_id, first_name, last_name, date_of_birth, positions, status, nationality, "
    "passports, height_cm, email, phone, parent1_name, parent1_email, parent2_name, parent2_email, "
    "video_url, cohort, program_start_date, program_end_date, insurance_expiry, visa_status, visa_expiry, "
    "house_id, room_id, jersey_number, notes, whereabouts_status, whereabouts_details, visa_requires, "
    "visa_arrival_date, visa_documents, visa_notes, created_at, updated_at"
)

UPDATABLE_COLUMNS = frozenset(
    {
        "first_name",
        "last_name",
        "date_of_birth",
        "positions",
        "status",
        "nationality",
        "passports",
        "height_cm",
        "email",
        "phone",
        "parent1_name",
        "parent1_email",
        "parent2_name",
        "parent2_email",
        "video_url",
        "cohort",
        "program_start_date",
        "program_end_date",
        "insurance_expiry",
        "visa_status",
        "visa_expiry",
        "house_id",
        "room_id",
        "jersey_number",
        "notes",
        "whereabouts_status",
        "whereabouts_details",
        "visa_requires",
        "visa_arrival_date",
        "visa_documents",
        "visa_notes",
    }
)


def _optional_int(value) -> Optional[int]:
    return int(value) if value is not None else None


def to_player(row: dict) -> Player:
    return Player(
        id=int(row["id"]),
        player_id=row["player_id"],
        account_id=_optional_int(row.get("account_id")),
        first_name=row["first_name"],
        last_name=row["last_name"],
        date_of_birth=row.get("date_of_birth"),
        positions=tuple(load_json_list(row.get("positions"))),
        status=PlayerStatus(row["status"]),
        nationality=row.get("nationality"),
        passports=row.get("passports"),
        height_cm=_optional_int(row.get("height_cm")),
        email=row.get("email"),
        phone=row.get("phone"),
        parent1_name=row.get("parent1_name"),
        parent1_email=row.get("parent1_email"),
        parent2_name=row.get("parent2_name"),
        parent2_email=row.get("parent2_email"),
        video_url=row.get("video_url"),
        cohort=row.get("cohort"),
        program_start_date=row.get("program_start_date"),
        program_end_date=row.get("program_end_date"),
        insurance_expiry=row.get("insurance_expiry"),
        visa_status=row.get("visa_status"),
        visa_expiry=row.get("visa_expiry"),
        house_id=_optional_int(row.get("house_id")),
        room_id=_optional_int(row.get("room_id")),
        jersey_number=_optional_int(row.get("jersey_number")),
        notes=row.get("notes"),
        whereabouts_status=WhereaboutsStatus(row.get("whereabouts_status") or WhereaboutsStatus.AT_ACADEMY),
        whereabouts_details=load_json_dict(row.get("whereabouts_details")),
        visa_requires=bool(row["visa_requires"]) if row.get("visa_requires") is not None else None,
        visa_arrival_date=row.get("visa_arrival_date"),
        visa_documents=load_json_dict(row.get("visa_documents")),
        visa_notes=row.get("visa_notes"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLPlayerRepository(PlayerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, id: int) -> Optional[Player]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM players WHERE id=%s", (id,))
            row = fetchone(cur)
            return to_player(row) if row else None

    def get_by_player_id(self, player_id: str) -> Optional[Player]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM players WHERE player_id=%s", (player_id,))
            row = fetchone(cur)
            return to_player(row) if row else None

    def list_players(
        self,
        *,
        status: Optional[PlayerStatus] = None,
        search: Optional[str] = None,
        house_id: Optional[int] = None,
    ) -> Sequence[Player]:
        where = []
        params: list = []
        if status:
            where.append("status=%s")
            params.append(status.value)
        if house_id is not None:
            where.append("house_id=%s")
            params.append(int(house_id))
        if search:
            like = f"%{search}%"
            where.append("(first_name LIKE %s OR last_name LIKE %s OR player_id LIKE %s OR nationality LIKE %s)")
            params.extend([like, like, like, like])

        sql = f"SELECT {_COLUMNS} FROM players"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY last_name, first_name"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [to_player(r) for r in fetchall(cur)]

    def last_issued_player_id(self) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                r"""
                SELECT player_id
                FROM players
                WHERE player_id LIKE 'ITP\_%'
                ORDER BY created_at DESC, id DESC
                LIMIT 1
                """
            )
            row = fetchone(cur)
            return row["player_id"] if row else None

    def create_player(self, player: NewPlayer) -> int:
        values = asdict(player)
        values["status"] = player.status.value
        values["positions"] = dump_json_list(player.positions)
        columns = list(values.keys())
        sql = "INSERT INTO players({}) VALUES({})".format(", ".join(columns), ", ".join(["%s"] * len(columns)))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(values[c] for c in columns))
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateKeyError() from e
            raise

    def update_player(self, id: int, changes: Dict[str, Any]) -> bool:
        changes = dict(changes)
        if "positions" in changes:
            changes["positions"] = dump_json_list(changes["positions"])
        for name in ("whereabouts_details", "visa_documents"):
            if name in changes:
                changes[name] = dump_json_dict(changes[name])
        set_clause, params = build_update(changes, UPDATABLE_COLUMNS)
        if not set_clause:
            return False
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"UPDATE players SET {set_clause} WHERE id=%s", (*params, id))
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateKeyError() from e
            raise

    def delete_player(self, id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM players WHERE id=%s", (id,))
            return cur.rowcount > 0
