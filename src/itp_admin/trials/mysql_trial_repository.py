from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import PlayerTrialStatus, TrialOutcome
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, dump_json_list, fetchall, fetchone, insert_row, load_json_list
from .model import PlayerTrial
from .repository import PlayerTrialRepository

COLUMNS = (
    "player_id",
    "trial_club",
    "trial_start_date",
    "trial_end_date",
    "trial_days",
    "status",
    "club_contact_name",
    "club_contact_email",
    "club_contact_phone",
    "trial_outcome",
    "offer_details",
    "itp_notes",
    "travel_arranged",
    "accommodation_arranged",
    "notes",
)

_SELECT = """
    SELECT t.*, CONCAT(p.first_name, ' ', p.last_name) AS player_name
    FROM player_trials t
    LEFT JOIN players p ON p.id = t.player_id
"""


def _encode(values: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(values)
    if "trial_days" in values:
        values["trial_days"] = dump_json_list(values["trial_days"])
    return values


def _to_trial(row: dict) -> PlayerTrial:
    return PlayerTrial(
        trial_id=int(row["trial_id"]),
        player_id=int(row["player_id"]),
        trial_club=row["trial_club"],
        trial_start_date=row["trial_start_date"],
        trial_end_date=row["trial_end_date"],
        trial_days=tuple(load_json_list(row.get("trial_days"))),
        status=PlayerTrialStatus(row["status"]),
        club_contact_name=row.get("club_contact_name"),
        club_contact_email=row.get("club_contact_email"),
        club_contact_phone=row.get("club_contact_phone"),
        trial_outcome=TrialOutcome(row["trial_outcome"]) if row.get("trial_outcome") else None,
        offer_details=row.get("offer_details"),
        itp_notes=row.get("itp_notes"),
        travel_arranged=bool(row.get("travel_arranged")),
        accommodation_arranged=bool(row.get("accommodation_arranged")),
        notes=row.get("notes"),
        player_name=row.get("player_name"),
        created_at=row.get("created_at"),
    )


class MySQLPlayerTrialRepository(PlayerTrialRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_trials(self) -> Sequence[PlayerTrial]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY t.trial_start_date DESC")
            return [_to_trial(r) for r in fetchall(cur)]

    def get_trial(self, trial_id: int) -> Optional[PlayerTrial]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.trial_id=%s", (trial_id,))
            row = fetchone(cur)
            return _to_trial(row) if row else None

    def create_trial(self, values: Dict[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "player_trials", _encode(values), COLUMNS)

    def update_trial(self, trial_id: int, changes: Dict[str, Any]) -> bool:
        set_clause, params = build_update(_encode(changes), COLUMNS)
        if not set_clause:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE player_trials SET {set_clause} WHERE trial_id=%s", (*params, trial_id))
            return cur.rowcount > 0

    def delete_trial(self, trial_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM player_trials WHERE trial_id=%s", (trial_id,))
            return cur.rowcount > 0
