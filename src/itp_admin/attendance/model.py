from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import TrainingAttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    attendance_id: int
    session_id: str
    session_date: date
    session_type: str
    player_id: int
    status: TrainingAttendanceStatus
    session_name: Optional[str] = None
    late_minutes: Optional[int] = None
    excuse_reason: Optional[str] = None
    notes: Optional[str] = None
    recorded_by: Optional[int] = None
    created_at: Optional[datetime] = None
