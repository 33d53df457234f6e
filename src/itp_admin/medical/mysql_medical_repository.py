from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AppointmentStatus, DoctorType, InsuranceClaimStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, insert_row, normalize_mysql_time
from .model import InsuranceClaim, MedicalAppointment
from .repository import MedicalRepository

APPOINTMENT_COLUMNS = (
    "player_id",
    "appointment_date",
    "appointment_time",
    "doctor_name",
    "doctor_type",
    "clinic_name",
    "clinic_address",
    "reason",
    "diagnosis",
    "prescription",
    "follow_up_required",
    "follow_up_date",
    "notes",
    "status",
)
CLAIM_COLUMNS = (
    "player_id",
    "appointment_id",
    "invoice_number",
    "invoice_date",
    "provider_name",
    "service_description",
    "amount",
    "status",
    "submission_date",
    "approval_date",
    "payment_date",
    "payment_reference",
    "rejection_reason",
    "notes",
)

_APPOINTMENT_SELECT = """
    SELECT m.*, CONCAT(p.first_name, ' ', p.last_name) AS player_name
    FROM medical_appointments m
    LEFT JOIN players p ON p.id = m.player_id
"""
_CLAIM_SELECT = """
    SELECT c.*, CONCAT(p.first_name, ' ', p.last_name) AS player_name
    FROM insurance_claims c
    LEFT JOIN players p ON p.id = c.player_id
"""


def _to_appointment(row: dict) -> MedicalAppointment:
    return MedicalAppointment(
        appointment_id=int(row["appointment_id"]),
        player_id=int(row["player_id"]),
        appointment_date=row["appointment_date"],
        appointment_time=normalize_mysql_time(row.get("appointment_time")),
        doctor_name=row["doctor_name"],
        doctor_type=DoctorType(row["doctor_type"]),
        clinic_name=row.get("clinic_name"),
        clinic_address=row.get("clinic_address"),
        reason=row["reason"],
        diagnosis=row.get("diagnosis"),
        prescription=row.get("prescription"),
        follow_up_required=bool(row.get("follow_up_required")),
        follow_up_date=row.get("follow_up_date"),
        notes=row.get("notes"),
        status=AppointmentStatus(row["status"]),
        player_name=row.get("player_name"),
        created_at=row.get("created_at"),
    )


def _to_claim(row: dict) -> InsuranceClaim:
    return InsuranceClaim(
        claim_id=int(row["claim_id"]),
        player_id=int(row["player_id"]),
        appointment_id=int(row["appointment_id"]) if row.get("appointment_id") is not None else None,
        invoice_number=row["invoice_number"],
        invoice_date=row["invoice_date"],
        provider_name=row["provider_name"],
        service_description=row["service_description"],
        amount=Decimal(str(row["amount"])),
        status=InsuranceClaimStatus(row["status"]),
        submission_date=row.get("submission_date"),
        approval_date=row.get("approval_date"),
        payment_date=row.get("payment_date"),
        payment_reference=row.get("payment_reference"),
        rejection_reason=row.get("rejection_reason"),
        notes=row.get("notes"),
        player_name=row.get("player_name"),
        created_at=row.get("created_at"),
    )


class MySQLMedicalRepository(MedicalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_appointments(self) -> Sequence[MedicalAppointment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_APPOINTMENT_SELECT + " ORDER BY m.appointment_date DESC, m.appointment_time DESC")
            return [_to_appointment(r) for r in fetchall(cur)]

    def get_appointment(self, appointment_id: int) -> Optional[MedicalAppointment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_APPOINTMENT_SELECT + " WHERE m.appointment_id=%s", (appointment_id,))
            row = fetchone(cur)
            return _to_appointment(row) if row else None

    def create_appointment(self, values: Dict[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "medical_appointments", values, APPOINTMENT_COLUMNS)

    def update_appointment(self, appointment_id: int, changes: Dict[str, Any]) -> bool:
        set_clause, params = build_update(changes, APPOINTMENT_COLUMNS)
        if not set_clause:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE medical_appointments SET {set_clause} WHERE appointment_id=%s", (*params, appointment_id))
            return cur.rowcount > 0

    def delete_appointment(self, appointment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM medical_appointments WHERE appointment_id=%s", (appointment_id,))
            return cur.rowcount > 0

    def list_claims(self) -> Sequence[InsuranceClaim]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_CLAIM_SELECT + " ORDER BY c.invoice_date DESC, c.claim_id DESC")
            return [_to_claim(r) for r in fetchall(cur)]

    def get_claim(self, claim_id: int) -> Optional[InsuranceClaim]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_CLAIM_SELECT + " WHERE c.claim_id=%s", (claim_id,))
            row = fetchone(cur)
            return _to_claim(row) if row else None

    def create_claim(self, values: Dict[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "insurance_claims", values, CLAIM_COLUMNS)

    def update_claim(self, claim_id: int, changes: Dict[str, Any]) -> bool:
        set_clause, params = build_update(changes, CLAIM_COLUMNS)
        if not set_clause:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE insurance_claims SET {set_clause} WHERE claim_id=%s", (*params, claim_id))
            return cur.rowcount > 0
