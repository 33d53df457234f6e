from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional, Tuple

from ..core.enums import PlayerStatus, WhereaboutsStatus


@dataclass(frozen=True)
class Player:
    id: int
    player_id: str
    first_name: str
    last_name: str
    status: PlayerStatus
    date_of_birth: Optional[date] = None
    positions: Tuple[str, ...] = ()
    nationality: Optional[str] = None
    passports: Optional[str] = None
    height_cm: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    parent1_name: Optional[str] = None
    parent1_email: Optional[str] = None
    parent2_name: Optional[str] = None
    parent2_email: Optional[str] = None
    video_url: Optional[str] = None
    cohort: Optional[str] = None
    program_start_date: Optional[date] = None
    program_end_date: Optional[date] = None
    insurance_expiry: Optional[date] = None
    visa_status: Optional[str] = None
    visa_expiry: Optional[date] = None
    house_id: Optional[int] = None
    room_id: Optional[int] = None
    jersey_number: Optional[int] = None
    notes: Optional[str] = None
    whereabouts_status: WhereaboutsStatus = WhereaboutsStatus.AT_ACADEMY
    whereabouts_details: Dict[str, str] = field(default_factory=dict)
    visa_requires: Optional[bool] = None
    visa_arrival_date: Optional[date] = None
    visa_documents: Dict[str, str] = field(default_factory=dict)
    visa_notes: Optional[str] = None
    account_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class NewPlayer:
    """Values for a player insert; `player_id` must already be allocated."""

    player_id: str
    first_name: str
    last_name: str
    status: PlayerStatus = PlayerStatus.PENDING
    date_of_birth: Optional[date] = None
    positions: Tuple[str, ...] = field(default_factory=tuple)
    nationality: Optional[str] = None
    passports: Optional[str] = None
    height_cm: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    parent1_name: Optional[str] = None
    parent1_email: Optional[str] = None
    parent2_name: Optional[str] = None
    parent2_email: Optional[str] = None
    video_url: Optional[str] = None
    cohort: Optional[str] = None
    program_start_date: Optional[date] = None
    program_end_date: Optional[date] = None
    insurance_expiry: Optional[date] = None
    visa_status: Optional[str] = None
    visa_expiry: Optional[date] = None
    house_id: Optional[int] = None
    jersey_number: Optional[int] = None
    notes: Optional[str] = None
    account_id: Optional[int] = None
