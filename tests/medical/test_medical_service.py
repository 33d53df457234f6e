from __future__ import annotations

from dataclasses import replace
from datetime import date, time
from decimal import Decimal

import pytest

from itp_admin.core.enums import AppointmentStatus, DoctorType, InsuranceClaimStatus
from itp_admin.core.exceptions import NotFoundError, ValidationError
from itp_admin.medical.model import InsuranceClaim, MedicalAppointment
from itp_admin.medical.service import MedicalService


class FakeMedicalRepo:
    def __init__(self):
        self.appointments = {}
        self.claims = {}

    def list_appointments(self):
        return list(self.appointments.values())

    def get_appointment(self, appointment_id):
        return self.appointments.get(appointment_id)

    def create_appointment(self, values):
        appointment_id = len(self.appointments) + 1
        self.appointments[appointment_id] = MedicalAppointment(appointment_id=appointment_id, **values)
        return appointment_id

    def update_appointment(self, appointment_id, changes):
        self.appointments[appointment_id] = replace(self.appointments[appointment_id], **changes)
        return True

    def delete_appointment(self, appointment_id):
        return self.appointments.pop(appointment_id, None) is not None

    def list_claims(self):
        return list(self.claims.values())

    def get_claim(self, claim_id):
        return self.claims.get(claim_id)

    def create_claim(self, values):
        claim_id = len(self.claims) + 1
        self.claims[claim_id] = InsuranceClaim(claim_id=claim_id, **values)
        return claim_id

    def update_claim(self, claim_id, changes):
        self.claims[claim_id] = replace(self.claims[claim_id], **changes)
        return True


CLAIM = {
    "player_id": 3,
    "invoice_number": "INV-2024-001",
    "invoice_date": "2024-03-01",
    "provider_name": "Sportklinik Köln",
    "service_description": "MRI knee",
    "amount": "450.5",
}


@pytest.fixture
def repo():
    return FakeMedicalRepo()


def test_create_appointment(repo):
    service = MedicalService(repo)
    appointment_id = service.create_appointment(
        {
            "player_id": "3",
            "appointment_date": "2024-03-20",
            "appointment_time": "14:30",
            "doctor_name": "Dr. Weber",
            "reason": "Knee pain",
        }
    )

    appointment = repo.get_appointment(appointment_id)
    assert appointment.status is AppointmentStatus.SCHEDULED
    assert appointment.doctor_type is DoctorType.GENERAL
    assert appointment.appointment_time == time(14, 30)


def test_appointment_validation(repo):
    service = MedicalService(repo)
    with pytest.raises(ValidationError, match="Doctor name is required"):
        service.create_appointment({"player_id": 3, "appointment_date": "2024-03-20", "reason": "x"})
    with pytest.raises(ValidationError, match="Follow-up date"):
        service.create_appointment(
            {
                "player_id": 3,
                "appointment_date": "2024-03-20",
                "doctor_name": "Dr. Weber",
                "reason": "Knee pain",
                "follow_up_required": "true",
            }
        )


def test_update_and_delete_appointment(repo):
    service = MedicalService(repo)
    appointment_id = service.create_appointment(
        {"player_id": 3, "appointment_date": "2024-03-20", "doctor_name": "Dr. Weber", "reason": "Knee pain"}
    )
    service.update_appointment(appointment_id, {"status": "completed", "diagnosis": "Strain"})
    assert repo.get_appointment(appointment_id).status is AppointmentStatus.COMPLETED

    service.delete_appointment(appointment_id)
    with pytest.raises(NotFoundError):
        service.update_appointment(appointment_id, {"status": "completed"})


def test_claim_lifecycle_stamps_dates(repo):
    service = MedicalService(repo)
    claim_id = service.create_claim(CLAIM)
    assert repo.get_claim(claim_id).amount == Decimal("450.50")
    assert repo.get_claim(claim_id).status is InsuranceClaimStatus.PENDING

    service.change_claim_status(claim_id, "submitted", today=date(2024, 3, 2))
    service.change_claim_status(claim_id, "in_review", today=date(2024, 3, 5))
    service.change_claim_status(claim_id, "approved", today=date(2024, 3, 10))
    service.change_claim_status(claim_id, "paid", payment_reference="TRX-9", today=date(2024, 3, 12))

    claim = repo.get_claim(claim_id)
    assert claim.submission_date == date(2024, 3, 2)
    assert claim.approval_date == date(2024, 3, 10)
    assert claim.payment_date == date(2024, 3, 12)
    assert claim.payment_reference == "TRX-9"
    assert claim.status is InsuranceClaimStatus.PAID


def test_claim_transitions_are_strict(repo):
    service = MedicalService(repo)
    claim_id = service.create_claim(CLAIM)

    with pytest.raises(ValidationError, match="Cannot move a pending claim to paid"):
        service.change_claim_status(claim_id, "paid")

    service.change_claim_status(claim_id, "submitted")
    with pytest.raises(ValidationError, match="Rejection reason is required"):
        service.change_claim_status(claim_id, "rejected")
    service.change_claim_status(claim_id, "rejected", rejection_reason="Not covered")
    assert repo.get_claim(claim_id).rejection_reason == "Not covered"

    with pytest.raises(ValidationError):
        service.change_claim_status(claim_id, "submitted")


def test_claim_amount_must_be_valid(repo):
    service = MedicalService(repo)
    with pytest.raises(ValidationError, match="Amount cannot be negative"):
        service.create_claim({**CLAIM, "amount": "-5"})
    with pytest.raises(ValidationError, match="Amount must be a number"):
        service.create_claim({**CLAIM, "amount": "lots"})
