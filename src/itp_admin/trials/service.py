from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.forms import parse_bool
from ..common.validators import optional_str, parse_enum, require_non_empty, require_positive
from ..core.enums import PlayerTrialStatus, TrialOutcome
from ..core.exceptions import NotFoundError, ValidationError
from .model import PlayerTrial
from .repository import PlayerTrialRepository

logger = logging.getLogger(__name__)

_TEXT = ("club_contact_name", "club_contact_email", "club_contact_phone", "offer_details", "itp_notes", "notes")
WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


def parse_trial_days(value) -> tuple:
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    days = []
    for day in value:
        key = str(day).strip().lower()[:3]
        if key not in WEEKDAYS:
            raise ValidationError(f"Invalid trial day: {day!r}")
        if key not in days:
            days.append(key)
    return tuple(days)


def _trial_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if "player_id" in data:
        out["player_id"] = require_positive(data["player_id"], "Player")
    if "trial_club" in data:
        out["trial_club"] = require_non_empty(data["trial_club"], "Club")
    for name in ("trial_start_date", "trial_end_date"):
        if name in data:
            out[name] = parse_iso_date(require_non_empty(str(data[name] or ""), name.replace("_", " ").capitalize()))
    if "trial_days" in data:
        out["trial_days"] = parse_trial_days(data["trial_days"])
    if "status" in data:
        out["status"] = parse_enum(PlayerTrialStatus, data["status"], "status")
    if "trial_outcome" in data:
        out["trial_outcome"] = parse_enum(TrialOutcome, data["trial_outcome"], "outcome") if data["trial_outcome"] else None
    for name in ("travel_arranged", "accommodation_arranged"):
        if name in data:
            out[name] = parse_bool(data[name])
    for name in _TEXT:
        if name in data:
            out[name] = optional_str(data[name])
    return out


class PlayerTrialService:
    def __init__(self, trials: PlayerTrialRepository):
        self._trials = trials

    def list_trials(self) -> Sequence[PlayerTrial]:
        return self._trials.list_trials()

    def create_trial(self, data: Dict[str, Any]) -> int:
        for required, label in (("player_id", "Player"), ("trial_club", "Club"), ("trial_start_date", "Start date"), ("trial_end_date", "End date")):
            if not data.get(required):
                raise ValidationError(f"{label} is required")
        values = _trial_fields(data)
        if values["trial_end_date"] < values["trial_start_date"]:
            raise ValidationError("End date cannot be before start date")
        values.setdefault("status", PlayerTrialStatus.SCHEDULED)
        values.setdefault("trial_outcome", TrialOutcome.PENDING)
        trial_id = self._trials.create_trial(values)
        logger.info("Trial %s: player %s at %s", trial_id, values["player_id"], values["trial_club"])
        return trial_id

    def update_trial(self, trial_id: int, data: Dict[str, Any]) -> None:
        trial = self._trials.get_trial(int(trial_id))
        if not trial:
            raise NotFoundError("Trial not found")
        changes = _trial_fields(data)
        if not changes:
            raise ValidationError("Nothing to update")
        start = changes.get("trial_start_date", trial.trial_start_date)
        end = changes.get("trial_end_date", trial.trial_end_date)
        if end < start:
            raise ValidationError("End date cannot be before start date")
        if not self._trials.update_trial(trial.trial_id, changes):
            raise ValidationError("Failed to update trial")

    def delete_trial(self, trial_id: int) -> None:
        if not self._trials.delete_trial(int(trial_id)):
            raise NotFoundError("Trial not found")
