from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from ..core.enums import AppointmentStatus, DoctorType, InsuranceClaimStatus


@dataclass(frozen=True)
class MedicalAppointment:
    appointment_id: int
    player_id: int
    appointment_date: date
    doctor_name: str
    doctor_type: DoctorType
    reason: str
    status: AppointmentStatus
    appointment_time: Optional[time] = None
    clinic_name: Optional[str] = None
    clinic_address: Optional[str] = None
    diagnosis: Optional[str] = None
    prescription: Optional[str] = None
    follow_up_required: bool = False
    follow_up_date: Optional[date] = None
    notes: Optional[str] = None
    player_name: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class InsuranceClaim:
    claim_id: int
    player_id: int
    invoice_number: str
    invoice_date: date
    provider_name: str
    service_description: str
    amount: Decimal
    status: InsuranceClaimStatus
    appointment_id: Optional[int] = None
    submission_date: Optional[date] = None
    approval_date: Optional[date] = None
    payment_date: Optional[date] = None
    payment_reference: Optional[str] = None
    rejection_reason: Optional[str] = None
    notes: Optional[str] = None
    player_name: Optional[str] = None
    created_at: Optional[datetime] = None
