from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, parse_optional_date, parse_time_of_day
from ..common.forms import parse_amount, parse_bool, parse_optional_int
from ..common.validators import optional_str, parse_enum, require_non_empty, require_positive
from ..core.enums import AppointmentStatus, DoctorType, InsuranceClaimStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import InsuranceClaim, MedicalAppointment
from .repository import MedicalRepository

logger = logging.getLogger(__name__)

CLAIM_TRANSITIONS = {
    InsuranceClaimStatus.PENDING: {InsuranceClaimStatus.SUBMITTED},
    InsuranceClaimStatus.SUBMITTED: {InsuranceClaimStatus.IN_REVIEW, InsuranceClaimStatus.REJECTED},
    InsuranceClaimStatus.IN_REVIEW: {InsuranceClaimStatus.APPROVED, InsuranceClaimStatus.REJECTED},
    InsuranceClaimStatus.APPROVED: {InsuranceClaimStatus.PAID},
    InsuranceClaimStatus.PAID: set(),
    InsuranceClaimStatus.REJECTED: set(),
}

_APPOINTMENT_TEXT = ("clinic_name", "clinic_address", "diagnosis", "prescription", "notes")


def _appointment_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if "player_id" in data:
        out["player_id"] = require_positive(data["player_id"], "Player")
    if "appointment_date" in data:
        out["appointment_date"] = parse_iso_date(data["appointment_date"])
    if "appointment_time" in data:
        out["appointment_time"] = parse_time_of_day(data["appointment_time"])
    if "doctor_name" in data:
        out["doctor_name"] = require_non_empty(data["doctor_name"], "Doctor name")
    if "doctor_type" in data:
        out["doctor_type"] = parse_enum(DoctorType, data["doctor_type"] or DoctorType.GENERAL, "doctor type")
    if "reason" in data:
        out["reason"] = require_non_empty(data["reason"], "Reason")
    if "status" in data:
        out["status"] = parse_enum(AppointmentStatus, data["status"], "status")
    if "follow_up_required" in data:
        out["follow_up_required"] = parse_bool(data["follow_up_required"])
    if "follow_up_date" in data:
        out["follow_up_date"] = parse_optional_date(data["follow_up_date"])
    for name in _APPOINTMENT_TEXT:
        if name in data:
            out[name] = optional_str(data[name])
    return out


class MedicalService:
    def __init__(self, medical: MedicalRepository):
        self._medical = medical

    # appointments

    def list_appointments(self) -> Sequence[MedicalAppointment]:
        return self._medical.list_appointments()

    def create_appointment(self, data: Dict[str, Any]) -> int:
        for required in ("player_id", "appointment_date", "doctor_name", "reason"):
            if not data.get(required):
                raise ValidationError(f"{required.replace('_', ' ').capitalize()} is required")
        values = _appointment_fields(data)
        values.setdefault("doctor_type", DoctorType.GENERAL)
        values["status"] = AppointmentStatus.SCHEDULED
        if values.get("follow_up_required") and not values.get("follow_up_date"):
            raise ValidationError("Follow-up date is required when a follow-up is needed")
        appointment_id = self._medical.create_appointment(values)
        logger.info("Medical appointment %s for player %s on %s", appointment_id, values["player_id"], values["appointment_date"])
        return appointment_id

    def update_appointment(self, appointment_id: int, data: Dict[str, Any]) -> None:
        if not self._medical.get_appointment(int(appointment_id)):
            raise NotFoundError("Appointment not found")
        changes = _appointment_fields(data)
        if not changes:
            raise ValidationError("Nothing to update")
        if not self._medical.update_appointment(int(appointment_id), changes):
            raise ValidationError("Failed to update appointment")

    def delete_appointment(self, appointment_id: int) -> None:
        if not self._medical.delete_appointment(int(appointment_id)):
            raise NotFoundError("Appointment not found")

    # insurance claims

    def list_claims(self) -> Sequence[InsuranceClaim]:
        return self._medical.list_claims()

    def create_claim(self, data: Dict[str, Any]) -> int:
        values = {
            "player_id": require_positive(data.get("player_id"), "Player"),
            "appointment_id": parse_optional_int(data.get("appointment_id"), "Appointment"),
            "invoice_number": require_non_empty(data.get("invoice_number"), "Invoice number"),
            "invoice_date": parse_iso_date(require_non_empty(data.get("invoice_date"), "Invoice date")),
            "provider_name": require_non_empty(data.get("provider_name"), "Provider name"),
            "service_description": require_non_empty(data.get("service_description"), "Service description"),
            "amount": parse_amount(require_non_empty(str(data.get("amount") or ""), "Amount")),
            "status": InsuranceClaimStatus.PENDING,
            "notes": optional_str(data.get("notes")),
        }
        claim_id = self._medical.create_claim(values)
        logger.info("Insurance claim %s created (%s, %s)", claim_id, values["invoice_number"], values["amount"])
        return claim_id

    def change_claim_status(
        self,
        claim_id: int,
        status,
        *,
        payment_reference: Optional[str] = None,
        rejection_reason: Optional[str] = None,
        today: Optional[date] = None,
    ) -> InsuranceClaimStatus:
        claim = self._medical.get_claim(int(claim_id))
        if not claim:
            raise NotFoundError("Claim not found")
        status = parse_enum(InsuranceClaimStatus, status, "status")
        if status not in CLAIM_TRANSITIONS[claim.status]:
            raise ValidationError(f"Cannot move a {claim.status.value} claim to {status.value}")

        today = today or date.today()
        changes: Dict[str, Any] = {"status": status}
        if status == InsuranceClaimStatus.SUBMITTED:
            changes["submission_date"] = today
        elif status == InsuranceClaimStatus.APPROVED:
            changes["approval_date"] = today
        elif status == InsuranceClaimStatus.PAID:
            changes["payment_date"] = today
            reference = optional_str(payment_reference)
            if reference:
                changes["payment_reference"] = reference
        elif status == InsuranceClaimStatus.REJECTED:
            changes["rejection_reason"] = require_non_empty(rejection_reason, "Rejection reason")

        if not self._medical.update_claim(claim.claim_id, changes):
            raise ValidationError("Failed to update claim")
        logger.info("Claim %s: %s -> %s", claim.claim_id, claim.status.value, status.value)
        return status
