from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import PlayerTrialStatus, TrialOutcome


@dataclass(frozen=True)
class PlayerTrial:
    """An academy player trialing at an external club."""

    trial_id: int
    player_id: int
    trial_club: str
    trial_start_date: date
    trial_end_date: date
    status: PlayerTrialStatus
    trial_days: Tuple[str, ...] = ()
    club_contact_name: Optional[str] = None
    club_contact_email: Optional[str] = None
    club_contact_phone: Optional[str] = None
    trial_outcome: Optional[TrialOutcome] = None
    offer_details: Optional[str] = None
    itp_notes: Optional[str] = None
    travel_arranged: bool = False
    accommodation_arranged: bool = False
    notes: Optional[str] = None
    player_name: Optional[str] = None
    created_at: Optional[datetime] = None
