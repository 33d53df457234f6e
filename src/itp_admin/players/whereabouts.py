"""Where each academy player is right now: at the academy, on trial, on leave, injured, at school or travelling."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..common.datetime_utils import parse_optional_date
from ..common.formatting import format_date
from ..common.validators import optional_str, parse_enum
from ..core.enums import PlayerStatus, WhereaboutsStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Player
from .repository import PlayerRepository

logger = logging.getLogger(__name__)

# Detail keys each status keeps; anything else is dropped on save.
DETAIL_KEYS = {
    WhereaboutsStatus.ON_TRIAL: ("club", "start_date", "end_date"),
    WhereaboutsStatus.HOME_LEAVE: ("destination", "return_date"),
    WhereaboutsStatus.INJURED: ("injury_type", "expected_return"),
    WhereaboutsStatus.TRAVELING: ("travel_destination", "return_date"),
}
_DATE_KEYS = {"start_date", "end_date", "return_date", "expected_return"}

STATUS_LABELS = {
    WhereaboutsStatus.AT_ACADEMY: "At Academy",
    WhereaboutsStatus.ON_TRIAL: "On Trial",
    WhereaboutsStatus.HOME_LEAVE: "Home Leave",
    WhereaboutsStatus.INJURED: "Injured",
    WhereaboutsStatus.SCHOOL: "School",
    WhereaboutsStatus.TRAVELING: "Traveling",
}


def clean_whereabouts_details(status: WhereaboutsStatus, details: Optional[Dict[str, Any]]) -> Dict[str, str]:
    details = details or {}
    if not isinstance(details, dict):
        raise ValidationError("Whereabouts details must be an object")
    out: Dict[str, str] = {}
    for key in DETAIL_KEYS.get(status, ()):
        if key in _DATE_KEYS:
            value = parse_optional_date(details.get(key))
            if value is not None:
                out[key] = value.isoformat()
        else:
            value = optional_str(details.get(key))
            if value is not None:
                out[key] = value
    return out


def return_info(player: Player) -> Optional[str]:
    details = player.whereabouts_details
    if details.get("return_date"):
        return f"Returns: {format_date(details['return_date'])}"
    if details.get("expected_return"):
        return f"Expected: {format_date(details['expected_return'])}"
    return None


def location_info(player: Player) -> Optional[str]:
    details = player.whereabouts_details
    if details.get("club"):
        return f"At: {details['club']}"
    if details.get("destination"):
        return f"Destination: {details['destination']}"
    if details.get("injury_type"):
        return f"Injury: {details['injury_type']}"
    return None


@dataclass(frozen=True)
class WhereaboutsEntry:
    player: Player
    return_info: Optional[str]
    location_info: Optional[str]


@dataclass(frozen=True)
class WhereaboutsGroup:
    status: WhereaboutsStatus
    label: str
    entries: List[WhereaboutsEntry]

    @property
    def count(self) -> int:
        return len(self.entries)


class WhereaboutsService:
    def __init__(self, players: PlayerRepository):
        self._players = players

    def board(self, status: Optional[str] = None) -> Sequence[WhereaboutsGroup]:
        """Active players grouped by whereabouts, in status order; one group when `status` is given."""
        wanted = None
        if status and status != "all":
            wanted = parse_enum(WhereaboutsStatus, status, "whereabouts")
        players = self._players.list_players(status=PlayerStatus.ACTIVE)
        groups = []
        for s in WhereaboutsStatus:
            if wanted is not None and s is not wanted:
                continue
            entries = [
                WhereaboutsEntry(player=p, return_info=return_info(p), location_info=location_info(p))
                for p in players
                if p.whereabouts_status is s
            ]
            groups.append(WhereaboutsGroup(status=s, label=STATUS_LABELS[s], entries=entries))
        return groups

    def update(self, id: int, data: Dict[str, Any]) -> None:
        player = self._players.get_by_id(int(id))
        if not player:
            raise NotFoundError("Player not found")
        status = parse_enum(WhereaboutsStatus, data.get("whereabouts_status") or data.get("status"), "whereabouts")
        details = clean_whereabouts_details(status, data.get("whereabouts_details") or data.get("details"))
        changes = {"whereabouts_status": status, "whereabouts_details": details}
        if not self._players.update_player(player.id, changes):
            raise ValidationError("Failed to update whereabouts")
        logger.info("Player %s whereabouts: %s", player.player_id, status.value)
