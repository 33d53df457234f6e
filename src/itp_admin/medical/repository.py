from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import InsuranceClaim, MedicalAppointment


class MedicalRepository(Protocol):
    def list_appointments(self) -> Sequence[MedicalAppointment]:
        raise NotImplementedError

    def get_appointment(self, appointment_id: int) -> Optional[MedicalAppointment]:
        raise NotImplementedError

    def create_appointment(self, values: Dict[str, Any]) -> int:
        raise NotImplementedError

    def update_appointment(self, appointment_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_appointment(self, appointment_id: int) -> bool:
        raise NotImplementedError

    def list_claims(self) -> Sequence[InsuranceClaim]:
        raise NotImplementedError

    def get_claim(self, claim_id: int) -> Optional[InsuranceClaim]:
        raise NotImplementedError

    def create_claim(self, values: Dict[str, Any]) -> int:
        raise NotImplementedError

    def update_claim(self, claim_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError
