from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import WellPassStatus


@dataclass(frozen=True)
class WellPassMembership:
    membership_id: int
    player_id: int
    status: WellPassStatus
    start_date: date
    membership_number: Optional[str] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None
    player_name: Optional[str] = None
    created_at: Optional[datetime] = None
