from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import ProspectStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, insert_row
from .model import TrialProspect
from .repository import ProspectRepository

COLUMNS = (
    "first_name",
    "last_name",
    "date_of_birth",
    "position",
    "nationality",
    "email",
    "phone",
    "whatsapp_number",
    "current_club",
    "height_cm",
    "video_url",
    "parent_name",
    "parent_contact",
    "agent_name",
    "trial_start_date",
    "trial_end_date",
    "accommodation_details",
    "scouting_notes",
    "evaluation_notes",
    "status",
    "passport_file_path",
    "parent1_passport_file_path",
    "parent2_passport_file_path",
    "vollmacht_file_path",
    "wellpass_consent_file_path",
)


def _to_prospect(row: dict) -> TrialProspect:
    values = {c: row.get(c) for c in COLUMNS if c != "status"}
    if values.get("height_cm") is not None:
        values["height_cm"] = int(values["height_cm"])
    return TrialProspect(
        prospect_id=int(row["prospect_id"]),
        status=ProspectStatus(row["status"]),
        created_at=row.get("created_at"),
        **values,
    )


class MySQLProspectRepository(ProspectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_prospects(self) -> Sequence[TrialProspect]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM trial_prospects ORDER BY created_at DESC")
            return [_to_prospect(r) for r in fetchall(cur)]

    def get_prospect(self, prospect_id: int) -> Optional[TrialProspect]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM trial_prospects WHERE prospect_id=%s", (prospect_id,))
            row = fetchone(cur)
            return _to_prospect(row) if row else None

    def create_prospect(self, values: Dict[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "trial_prospects", values, COLUMNS)

    def update_prospect(self, prospect_id: int, changes: Dict[str, Any]) -> bool:
        set_clause, params = build_update(changes, COLUMNS)
        if not set_clause:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE trial_prospects SET {set_clause} WHERE prospect_id=%s", (*params, prospect_id))
            return cur.rowcount > 0

    def set_status(self, prospect_id: int, status: ProspectStatus) -> bool:
        return self.update_prospect(prospect_id, {"status": status})

    def delete_prospect(self, prospect_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM trial_prospects WHERE prospect_id=%s", (prospect_id,))
            return cur.rowcount > 0
