from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.forms import parse_optional_int
from ..common.validators import optional_str, parse_enum, require_non_empty
from ..core.constants import MAX_UPLOAD_BYTES, ONBOARDING_BUCKET
from ..core.enums import ProspectStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..documents.service import UploadedFile, epoch_millis, sanitize_filename
from ..storage.bucket import BucketStorage
from .model import ONBOARDING_DOCUMENT_FIELDS, TrialProspect
from .repository import ProspectRepository

logger = logging.getLogger(__name__)

_TEXT = (
    "first_name",
    "last_name",
    "position",
    "nationality",
    "email",
    "phone",
    "whatsapp_number",
    "current_club",
    "video_url",
    "parent_name",
    "parent_contact",
    "agent_name",
    "accommodation_details",
    "scouting_notes",
    "evaluation_notes",
)
_DATES = ("date_of_birth", "trial_start_date", "trial_end_date")


@dataclass(frozen=True)
class ProspectPipeline:
    prospects: Sequence[TrialProspect]
    counts: Dict[str, int]


def status_counts(prospects: Sequence[TrialProspect]) -> Dict[str, int]:
    counts = {"all": len(prospects)}
    for status in ProspectStatus:
        counts[status.value] = sum(1 for p in prospects if p.status == status)
    return counts


def matches_search(prospect: TrialProspect, search: Optional[str]) -> bool:
    if not search:
        return True
    needle = search.lower()
    haystacks = (prospect.full_name, prospect.current_club or "", prospect.nationality or "")
    return any(needle in h.lower() for h in haystacks)


def by_trial_start(prospects: Sequence[TrialProspect]) -> List[TrialProspect]:
    """Earliest trial first; prospects without a trial date go last."""
    return sorted(prospects, key=lambda p: (p.trial_start_date is None, p.trial_start_date or date.min))


def _prospect_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for name in _TEXT:
        if name in data:
            out[name] = optional_str(data[name])
    for name in _DATES:
        if name in data:
            out[name] = parse_optional_date(data[name])
    if "height_cm" in data:
        out["height_cm"] = parse_optional_int(data["height_cm"], "Height")
    if "status" in data and data["status"]:
        out["status"] = parse_enum(ProspectStatus, data["status"], "status")
    return out


class ProspectService:
    def __init__(
        self,
        prospects: ProspectRepository,
        storage: BucketStorage,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._prospects = prospects
        self._storage = storage
        self._clock = clock

    def pipeline(self, *, status: Optional[str] = None, search: Optional[str] = None) -> ProspectPipeline:
        prospects = list(self._prospects.list_prospects())
        wanted = None
        if status and status != "all":
            wanted = parse_enum(ProspectStatus, status, "status")
        search = optional_str(search)
        shown = [p for p in prospects if (wanted is None or p.status == wanted) and matches_search(p, search)]
        return ProspectPipeline(prospects=by_trial_start(shown), counts=status_counts(prospects))

    def get_prospect(self, prospect_id: int) -> TrialProspect:
        prospect = self._prospects.get_prospect(int(prospect_id))
        if not prospect:
            raise NotFoundError("Prospect not found")
        return prospect

    def create_prospect(self, data: Dict[str, Any]) -> int:
        values = _prospect_fields(data)
        values["first_name"] = require_non_empty(values.get("first_name"), "First name")
        values["last_name"] = require_non_empty(values.get("last_name"), "Last name")
        values.setdefault("status", ProspectStatus.INQUIRY)
        self._check_dates(values.get("trial_start_date"), values.get("trial_end_date"))
        prospect_id = self._prospects.create_prospect(values)
        logger.info("Prospect %s created (%s %s)", prospect_id, values["first_name"], values["last_name"])
        return prospect_id

    def update_prospect(self, prospect_id: int, data: Dict[str, Any]) -> None:
        prospect = self.get_prospect(prospect_id)
        changes = _prospect_fields(data)
        if "first_name" in changes:
            changes["first_name"] = require_non_empty(changes["first_name"], "First name")
        if "last_name" in changes:
            changes["last_name"] = require_non_empty(changes["last_name"], "Last name")
        if not changes:
            raise ValidationError("Nothing to update")
        self._check_dates(
            changes.get("trial_start_date", prospect.trial_start_date),
            changes.get("trial_end_date", prospect.trial_end_date),
        )
        if not self._prospects.update_prospect(prospect.prospect_id, changes):
            raise ValidationError("Failed to update prospect")

    def set_status(self, prospect_id: int, status) -> None:
        prospect = self.get_prospect(prospect_id)
        new_status = parse_enum(ProspectStatus, status, "status")
        if not self._prospects.set_status(prospect.prospect_id, new_status):
            raise ValidationError("Failed to update prospect status")
        logger.info("Prospect %s: %s -> %s", prospect.prospect_id, prospect.status.value, new_status.value)

    def delete_prospect(self, prospect_id: int) -> None:
        prospect = self.get_prospect(prospect_id)
        paths = list(prospect.onboarding_documents().values())
        if not self._prospects.delete_prospect(prospect.prospect_id):
            raise NotFoundError("Prospect not found")
        if paths:
            self._storage.remove(ONBOARDING_BUCKET, paths)

    def upload_onboarding_document(self, prospect_id: int, doc_type: str, file: Optional[UploadedFile]) -> str:
        prospect = self.get_prospect(prospect_id)
        columns = dict(ONBOARDING_DOCUMENT_FIELDS)
        if doc_type not in columns:
            raise ValidationError(f"Invalid document type: {doc_type!r}")
        if not file or not file.filename:
            raise ValidationError("Missing file")
        if file.size > MAX_UPLOAD_BYTES:
            raise ValidationError("File size must be less than 10MB")

        path = f"{prospect.prospect_id}/{doc_type}_{epoch_millis(self._clock())}_{sanitize_filename(file.filename)}"
        self._storage.upload(ONBOARDING_BUCKET, path, file.data, content_type=file.content_type)

        previous = getattr(prospect, columns[doc_type])
        self._prospects.update_prospect(prospect.prospect_id, {columns[doc_type]: path})
        if previous:
            self._storage.remove(ONBOARDING_BUCKET, [previous])
        return path

    def onboarding_document_url(self, file_path: str) -> str:
        if not optional_str(file_path):
            raise ValidationError("File path is required")
        return self._storage.create_signed_url(ONBOARDING_BUCKET, file_path)

    @staticmethod
    def _check_dates(start, end) -> None:
        if start and end and end < start:
            raise ValidationError("Trial end date cannot be before start date")
