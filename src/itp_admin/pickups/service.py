from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from ..calendar.model import NewEvent
from ..calendar.repository import CalendarRepository
from ..common.datetime_utils import parse_iso_date, parse_time_of_day
from ..common.forms import parse_bool, parse_optional_int
from ..common.validators import optional_str, parse_enum, require_non_empty, require_positive
from ..core.constants import AIRPORT_LOCATIONS, TRAIN_STATION_LOCATIONS
from ..core.enums import EventType, PickupLocationType, PickupStatus, PickupTransport
from ..core.exceptions import NotFoundError, ValidationError
from ..players.repository import PlayerRepository
from .model import Pickup
from .repository import PickupRepository

logger = logging.getLogger(__name__)

_TEXT = ("flight_train_number", "notes")


def known_locations(location_type: PickupLocationType) -> tuple:
    if location_type is PickupLocationType.AIRPORT:
        return AIRPORT_LOCATIONS
    return TRAIN_STATION_LOCATIONS


def _pickup_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if "player_id" in data:
        out["player_id"] = require_positive(data["player_id"], "Player")
    if "assigned_staff_id" in data:
        out["assigned_staff_id"] = parse_optional_int(data["assigned_staff_id"], "Assigned staff")
    if "location_type" in data:
        out["location_type"] = parse_enum(PickupLocationType, data["location_type"], "location type")
    if "location_name" in data:
        out["location_name"] = require_non_empty(data["location_name"], "Location")
    if "arrival_date" in data:
        out["arrival_date"] = parse_iso_date(require_non_empty(data["arrival_date"], "Arrival date"))
    if "arrival_time" in data:
        out["arrival_time"] = parse_time_of_day(data["arrival_time"] or None)
    if "transport_type" in data:
        out["transport_type"] = parse_enum(PickupTransport, data["transport_type"], "transport")
    if "status" in data:
        out["status"] = parse_enum(PickupStatus, data["status"], "status")
    for name in _TEXT:
        if name in data:
            out[name] = optional_str(data[name])
    if "has_family" in data:
        out["has_family"] = parse_bool(data["has_family"])
        if out["has_family"]:
            out["family_count"] = parse_optional_int(data.get("family_count"), "Family members") or 0
            if out["family_count"] < 0:
                raise ValidationError("Family members cannot be negative")
            out["family_notes"] = optional_str(data.get("family_notes"))
        else:
            out["family_count"] = 0
            out["family_notes"] = None
    return out


def _event_fields(player_name: str, values: Dict[str, Any]) -> Dict[str, Any]:
    description = values["location_name"]
    if values.get("flight_train_number"):
        description = f"{description} - {values['flight_train_number']}"
    return {
        "title": f"Pickup: {player_name}",
        "description": description,
        "date": values["arrival_date"],
        "start_time": values.get("arrival_time"),
        "location": values["location_name"],
        "all_day": values.get("arrival_time") is None,
    }


class PickupService:
    """Arrival pickups. Each pickup owns one airport_pickup calendar event."""

    def __init__(self, pickups: PickupRepository, *, events: CalendarRepository, players: PlayerRepository):
        self._pickups = pickups
        self._events = events
        self._players = players

    def list_pickups(self, status: Optional[str] = None) -> Sequence[Pickup]:
        pickups = self._pickups.list_pickups()
        if status and status != "all":
            wanted = parse_enum(PickupStatus, status, "status")
            pickups = [p for p in pickups if p.status is wanted]
        return pickups

    def _player_name(self, player_id: int) -> str:
        player = self._players.get_by_id(player_id)
        if not player:
            raise NotFoundError("Player not found")
        return player.full_name

    def create_pickup(self, data: Dict[str, Any]) -> int:
        for required, label in (
            ("player_id", "Player"),
            ("location_type", "Location type"),
            ("location_name", "Location"),
            ("arrival_date", "Arrival date"),
        ):
            if not data.get(required):
                raise ValidationError(f"{label} is required")
        values = _pickup_fields(data)
        values.setdefault("transport_type", PickupTransport.WARUBI_CAR)
        values.setdefault("status", PickupStatus.SCHEDULED)
        values.setdefault("has_family", False)
        values.setdefault("family_count", 0)

        event = _event_fields(self._player_name(values["player_id"]), values)
        [event_id] = self._events.create_events([NewEvent(type=EventType.AIRPORT_PICKUP, **event)])
        values["calendar_event_id"] = event_id
        try:
            pickup_id = self._pickups.create_pickup(values)
        except Exception:
            logger.warning("Pickup insert failed; removing calendar event %s", event_id)
            self._events.delete_events([event_id])
            raise
        logger.info("Pickup %s: player %s at %s on %s", pickup_id, values["player_id"], values["location_name"], values["arrival_date"])
        return pickup_id

    def update_pickup(self, pickup_id: int, data: Dict[str, Any]) -> None:
        pickup = self._pickups.get_pickup(int(pickup_id))
        if not pickup:
            raise NotFoundError("Pickup not found")
        changes = _pickup_fields(data)
        if not changes:
            raise ValidationError("Nothing to update")
        if not self._pickups.update_pickup(pickup.pickup_id, changes):
            raise ValidationError("Failed to update pickup")

        if pickup.calendar_event_id is not None:
            merged = {
                "location_name": changes.get("location_name", pickup.location_name),
                "flight_train_number": changes.get("flight_train_number", pickup.flight_train_number),
                "arrival_date": changes.get("arrival_date", pickup.arrival_date),
                "arrival_time": changes.get("arrival_time", pickup.arrival_time),
            }
            player_id = changes.get("player_id", pickup.player_id)
            self._events.update_events([pickup.calendar_event_id], _event_fields(self._player_name(player_id), merged))

    def delete_pickup(self, pickup_id: int) -> None:
        pickup = self._pickups.get_pickup(int(pickup_id))
        if not pickup:
            raise NotFoundError("Pickup not found")
        if pickup.calendar_event_id is not None:
            self._events.delete_events([pickup.calendar_event_id])
        self._pickups.delete_pickup(pickup.pickup_id)
        logger.info("Pickup %s deleted", pickup.pickup_id)
