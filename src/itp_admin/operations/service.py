from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from ..common.datetime_utils import parse_iso_date, parse_optional_date
from ..common.validators import optional_str, parse_enum, require_positive
from ..core.enums import GroceryOrderStatus, InsuranceClaimStatus, PlayerTrialStatus, WellPassStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..grocery.repository import GroceryOrderRepository
from ..medical.repository import MedicalRepository
from ..trials.repository import PlayerTrialRepository
from .model import WellPassMembership
from .repository import WellPassRepository

logger = logging.getLogger(__name__)

OPEN_CLAIM_STATUSES = (InsuranceClaimStatus.PENDING, InsuranceClaimStatus.SUBMITTED, InsuranceClaimStatus.IN_REVIEW)
ACTIVE_TRIAL_STATUSES = (PlayerTrialStatus.SCHEDULED, PlayerTrialStatus.ONGOING)


@dataclass(frozen=True)
class OperationsOverview:
    memberships: Sequence[WellPassMembership]
    wellpass_counts: Dict[str, int]
    open_claims: int
    active_trials: int
    pending_grocery_orders: int


def _membership_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if "player_id" in data:
        out["player_id"] = require_positive(data["player_id"], "Player")
    if "membership_number" in data:
        out["membership_number"] = optional_str(data["membership_number"])
    if "status" in data:
        out["status"] = parse_enum(WellPassStatus, data["status"] or WellPassStatus.PENDING, "status")
    if "start_date" in data:
        if not data["start_date"]:
            raise ValidationError("Start date is required")
        out["start_date"] = parse_iso_date(data["start_date"])
    if "end_date" in data:
        out["end_date"] = parse_optional_date(data["end_date"])
    if "notes" in data:
        out["notes"] = optional_str(data["notes"])
    return out


class OperationsService:
    def __init__(
        self,
        wellpass: WellPassRepository,
        *,
        medical: MedicalRepository,
        trials: PlayerTrialRepository,
        grocery: GroceryOrderRepository,
    ):
        self._wellpass = wellpass
        self._medical = medical
        self._trials = trials
        self._grocery = grocery

    def overview(self) -> OperationsOverview:
        memberships = list(self._wellpass.list_memberships())
        counts = {s.value: 0 for s in WellPassStatus}
        for m in memberships:
            counts[m.status.value] += 1
        return OperationsOverview(
            memberships=memberships,
            wellpass_counts=counts,
            open_claims=sum(1 for c in self._medical.list_claims() if c.status in OPEN_CLAIM_STATUSES),
            active_trials=sum(1 for t in self._trials.list_trials() if t.status in ACTIVE_TRIAL_STATUSES),
            pending_grocery_orders=sum(1 for o in self._grocery.list_orders() if o.status == GroceryOrderStatus.PENDING),
        )

    def create_membership(self, data: Dict[str, Any]) -> int:
        if not data.get("player_id"):
            raise ValidationError("Player is required")
        if not data.get("start_date"):
            raise ValidationError("Start date is required")
        values = _membership_fields(data)
        values.setdefault("status", WellPassStatus.PENDING)
        self._check_dates(values)
        membership_id = self._wellpass.create_membership(values)
        logger.info("WellPass membership %s created for player %s", membership_id, values["player_id"])
        return membership_id

    def update_membership(self, membership_id: int, data: Dict[str, Any]) -> None:
        membership = self._wellpass.get_membership(int(membership_id))
        if not membership:
            raise NotFoundError("Membership not found")
        changes = _membership_fields(data)
        if not changes:
            raise ValidationError("Nothing to update")
        self._check_dates({"start_date": membership.start_date, "end_date": membership.end_date, **changes})
        if not self._wellpass.update_membership(membership.membership_id, changes):
            raise ValidationError("Failed to update membership")

    def delete_membership(self, membership_id: int) -> None:
        if not self._wellpass.delete_membership(int(membership_id)):
            raise NotFoundError("Membership not found")

    @staticmethod
    def _check_dates(values: Dict[str, Any]) -> None:
        start, end = values.get("start_date"), values.get("end_date")
        if start and end and end < start:
            raise ValidationError("End date cannot be before start date")
