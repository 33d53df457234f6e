from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Sequence, Tuple

from ..common.datetime_utils import parse_iso_date, parse_optional_date
from ..common.excel import rows_to_xlsx
from ..common.forms import parse_bool, parse_optional_int
from ..common.validators import optional_str, parse_enum, require_non_empty
from ..core.constants import PLAYER_ID_MAX_ATTEMPTS
from ..core.enums import PlayerStatus, Role
from ..core.exceptions import AuthorizationError, DomainError, DuplicateKeyError, NotFoundError, ValidationError
from .model import NewPlayer, Player
from .player_ids import next_player_id
from .repository import PlayerRepository

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    "first_name",
    "last_name",
    "nationality",
    "passports",
    "email",
    "phone",
    "parent1_name",
    "parent1_email",
    "parent2_name",
    "parent2_email",
    "video_url",
    "cohort",
    "visa_status",
    "notes",
)
DATE_FIELDS = ("date_of_birth", "program_start_date", "program_end_date", "insurance_expiry", "visa_expiry")
INT_FIELDS = ("height_cm", "jersey_number", "house_id", "room_id")

ROSTER_COLUMNS = (
    "Player ID",
    "First Name",
    "Last Name",
    "Date of Birth",
    "Positions",
    "Status",
    "Nationality",
    "Email",
    "Phone",
    "Cohort",
    "Program End",
    "Insurance Expiry",
    "Visa Status",
    "Visa Expiry",
)


class PlayerIdExhaustedError(DomainError):
    """Every attempt to allocate an ITP_NNN id collided with an existing row."""


def parse_positions(value) -> Tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(p.strip() for p in value if p and str(p).strip())


def clean_player_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep known player columns from a form payload and coerce their types."""
    out: Dict[str, Any] = {}
    for name in TEXT_FIELDS:
        if name in data:
            out[name] = optional_str(data[name])
    for name in DATE_FIELDS:
        if name in data:
            out[name] = parse_optional_date(data[name])
    for name in INT_FIELDS:
        if name in data:
            out[name] = parse_optional_int(data[name], name)
    if "positions" in data:
        out["positions"] = parse_positions(data["positions"])
    if "status" in data and data["status"]:
        out["status"] = parse_enum(PlayerStatus, data["status"], "status")
    return out


def clean_visa_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Visa tracking columns editable on an existing player."""
    out: Dict[str, Any] = {}
    if "visa_notes" in data:
        out["visa_notes"] = optional_str(data["visa_notes"])
    if "visa_arrival_date" in data:
        out["visa_arrival_date"] = parse_optional_date(data["visa_arrival_date"])
    if "visa_requires" in data:
        # blank means "decide from nationality"
        out["visa_requires"] = None if data["visa_requires"] in (None, "") else parse_bool(data["visa_requires"])
    return out


class PlayerService:
    def __init__(self, players: PlayerRepository):
        self._players = players

    def list_roster(self, *, status: Optional[str] = None, search: Optional[str] = None) -> Sequence[Player]:
        status_filter = None
        if status and status != "all":
            status_filter = parse_enum(PlayerStatus, status, "status")
        return self._players.list_players(status=status_filter, search=optional_str(search))

    def get_player(self, id: int) -> Player:
        player = self._players.get_by_id(int(id))
        if not player:
            raise NotFoundError("Player not found")
        return player

    def insert_with_next_id(self, draft: NewPlayer) -> Tuple[int, str]:
        """Insert `draft` under the next free ITP_NNN id, retrying on collisions."""
        for attempt in range(1, PLAYER_ID_MAX_ATTEMPTS + 1):
            player_id = next_player_id(self._players.last_issued_player_id())
            try:
                id = self._players.create_player(replace(draft, player_id=player_id))
            except DuplicateKeyError:
                logger.warning("Player id %s already taken (attempt %d/%d)", player_id, attempt, PLAYER_ID_MAX_ATTEMPTS)
                continue
            return id, player_id
        raise PlayerIdExhaustedError("Failed to generate unique player ID after retries")

    def create_player(self, data: Dict[str, Any]) -> Tuple[int, str]:
        fields = clean_player_fields(data)
        first_name = require_non_empty(fields.get("first_name"), "First name")
        last_name = require_non_empty(fields.get("last_name"), "Last name")
        if not data.get("date_of_birth"):
            raise ValidationError("Date of birth is required")
        fields["date_of_birth"] = parse_iso_date(data["date_of_birth"])
        fields.pop("room_id", None)
        fields.update(first_name=first_name, last_name=last_name)
        fields.setdefault("status", PlayerStatus.PENDING)

        requested_id = optional_str(data.get("player_id"))
        if requested_id:
            if self._players.get_by_player_id(requested_id):
                raise ValidationError(f"Player ID {requested_id} is already in use")
            id = self._players.create_player(NewPlayer(player_id=requested_id, **fields))
            player_id = requested_id
        else:
            id, player_id = self.insert_with_next_id(NewPlayer(player_id="", **fields))

        logger.info("Created player %s (%s %s)", player_id, first_name, last_name)
        return id, player_id

    def update_player(self, id: int, data: Dict[str, Any]) -> None:
        existing = self._players.get_by_id(int(id))
        if not existing:
            raise NotFoundError("Player not found")

        changes = clean_player_fields(data)
        if "first_name" in changes:
            changes["first_name"] = require_non_empty(changes["first_name"], "First name")
        if "last_name" in changes:
            changes["last_name"] = require_non_empty(changes["last_name"], "Last name")
        changes.update(clean_visa_fields(data))
        if not changes:
            raise ValidationError("Nothing to update")

        if not self._players.update_player(existing.id, changes):
            raise ValidationError("Update did not affect any rows")
        logger.info("Updated player %s (%s)", existing.player_id, ", ".join(sorted(changes)))

    def delete_player(self, *, current_role: Role, id: int, hard: bool = False) -> None:
        player = self.get_player(id)
        if hard:
            if current_role != Role.ADMIN:
                raise AuthorizationError("Only admins can permanently delete players")
            if not self._players.delete_player(player.id):
                raise ValidationError("Delete failed")
            logger.info("Hard-deleted player %s", player.player_id)
            return

        # a cancelled player gives up their bed
        released = {"status": PlayerStatus.CANCELLED, "room_id": None, "house_id": None}
        if not self._players.update_player(player.id, released):
            raise ValidationError("Delete failed")
        logger.info("Cancelled player %s", player.player_id)

    def export_roster(self, *, status: Optional[str] = None) -> bytes:
        rows = []
        for p in self.list_roster(status=status):
            rows.append(
                {
                    "Player ID": p.player_id,
                    "First Name": p.first_name,
                    "Last Name": p.last_name,
                    "Date of Birth": p.date_of_birth.isoformat() if p.date_of_birth else "",
                    "Positions": ", ".join(p.positions),
                    "Status": p.status.value,
                    "Nationality": p.nationality or "",
                    "Email": p.email or "",
                    "Phone": p.phone or "",
                    "Cohort": p.cohort or "",
                    "Program End": p.program_end_date.isoformat() if p.program_end_date else "",
                    "Insurance Expiry": p.insurance_expiry.isoformat() if p.insurance_expiry else "",
                    "Visa Status": p.visa_status or "",
                    "Visa Expiry": p.visa_expiry.isoformat() if p.visa_expiry else "",
                }
            )
        return rows_to_xlsx(rows, sheet_name="Roster", columns=ROSTER_COLUMNS)
