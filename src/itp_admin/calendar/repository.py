from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .model import CalendarEvent, NewEvent, TrainingLoad, WellnessLog


class CalendarRepository(Protocol):
    def list_events(self, start: date, end: date) -> Sequence[CalendarEvent]:
        """Stored events dated start..end, attendees included."""
        raise NotImplementedError

    def get_event(self, event_id: int) -> Optional[CalendarEvent]:
        raise NotImplementedError

    def list_series(self, head_id: int) -> Sequence[CalendarEvent]:
        """Series head plus its instances, ordered by date."""
        raise NotImplementedError

    def create_events(self, events: Sequence[NewEvent]) -> List[int]:
        raise NotImplementedError

    def update_events(self, event_ids: Sequence[int], changes: Dict[str, Any]) -> int:
        raise NotImplementedError

    def reparent(self, old_parent_id: int, new_parent_id: int) -> int:
        raise NotImplementedError

    def delete_events(self, event_ids: Sequence[int]) -> int:
        raise NotImplementedError

    def add_attendees(self, event_ids: Sequence[int], player_ids: Sequence[int]) -> None:
        raise NotImplementedError

    def replace_attendees(self, event_ids: Sequence[int], player_ids: Sequence[int]) -> None:
        raise NotImplementedError

    def list_wellness_logs(self, day: date) -> Sequence[WellnessLog]:
        raise NotImplementedError

    def list_training_loads(self, day: date) -> Sequence[TrainingLoad]:
        raise NotImplementedError
