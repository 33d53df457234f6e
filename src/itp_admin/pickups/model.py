from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import PickupLocationType, PickupStatus, PickupTransport


@dataclass(frozen=True)
class Pickup:
    """A scheduled collection of an arriving player, mirrored on the calendar."""

    pickup_id: int
    player_id: int
    location_type: PickupLocationType
    location_name: str
    arrival_date: date
    arrival_time: Optional[time] = None
    transport_type: PickupTransport = PickupTransport.WARUBI_CAR
    flight_train_number: Optional[str] = None
    assigned_staff_id: Optional[int] = None
    has_family: bool = False
    family_count: int = 0
    family_notes: Optional[str] = None
    status: PickupStatus = PickupStatus.SCHEDULED
    notes: Optional[str] = None
    calendar_event_id: Optional[int] = None
    player_name: Optional[str] = None
    staff_name: Optional[str] = None
    created_at: Optional[datetime] = None
