from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Optional

from ..core.enums import ProspectStatus

# document type -> column holding its path in the onboarding bucket
ONBOARDING_DOCUMENT_FIELDS = (
    ("passport", "passport_file_path"),
    ("parent1_passport", "parent1_passport_file_path"),
    ("parent2_passport", "parent2_passport_file_path"),
    ("vollmacht", "vollmacht_file_path"),
    ("wellpass_consent", "wellpass_consent_file_path"),
)


@dataclass(frozen=True)
class TrialProspect:
    prospect_id: int
    first_name: str
    last_name: str
    status: ProspectStatus
    date_of_birth: Optional[date] = None
    position: Optional[str] = None
    nationality: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    whatsapp_number: Optional[str] = None
    current_club: Optional[str] = None
    height_cm: Optional[int] = None
    video_url: Optional[str] = None
    parent_name: Optional[str] = None
    parent_contact: Optional[str] = None
    agent_name: Optional[str] = None
    trial_start_date: Optional[date] = None
    trial_end_date: Optional[date] = None
    accommodation_details: Optional[str] = None
    scouting_notes: Optional[str] = None
    evaluation_notes: Optional[str] = None
    passport_file_path: Optional[str] = None
    parent1_passport_file_path: Optional[str] = None
    parent2_passport_file_path: Optional[str] = None
    vollmacht_file_path: Optional[str] = None
    wellpass_consent_file_path: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def onboarding_documents(self) -> Dict[str, str]:
        """Uploaded onboarding files keyed by document type."""
        out = {}
        for doc_type, column in ONBOARDING_DOCUMENT_FIELDS:
            path = getattr(self, column)
            if path:
                out[doc_type] = path
        return out


@dataclass(frozen=True)
class ConversionResult:
    success: bool
    player_row_id: Optional[int] = None
    player_id: Optional[str] = None
    warning: Optional[str] = None
    error: Optional[str] = None
