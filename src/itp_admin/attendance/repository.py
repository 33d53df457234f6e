from __future__ import annotations

from datetime import date
from typing import Any, Dict, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_since(self, since: date) -> Sequence[AttendanceRecord]:
        """Records with session_date >= since, newest first."""
        raise NotImplementedError

    def upsert_records(self, records: Sequence[Dict[str, Any]]) -> int:
        """Insert or overwrite by (session_id, player_id)."""
        raise NotImplementedError
