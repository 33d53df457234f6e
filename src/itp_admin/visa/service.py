"""Visa paperwork for non-EU players: the document checklist, the application status and the 90-day registration deadline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..common.datetime_utils import calculate_age, now_local
from ..common.validators import parse_enum
from ..core.constants import (
    EU_NATIONALITIES,
    MINOR_ONLY_VISA_DOCUMENTS,
    VISA_DOCUMENT_LABELS,
    VISA_REGISTRATION_DAYS,
    VISA_URGENT_DAYS,
)
from ..core.enums import DocumentCategory, PlayerStatus, VisaApplicationStatus, VisaDocumentStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..documents.model import PlayerDocument
from ..documents.repository import DocumentRepository
from ..documents.service import DocumentService, UploadedFile
from ..players.model import Player
from ..players.repository import PlayerRepository

logger = logging.getLogger(__name__)

VISA_FILTERS = ("all", "requires_visa", "urgent")


def default_checklist() -> Dict[str, VisaDocumentStatus]:
    return {
        key: VisaDocumentStatus.NOT_REQUIRED if key in MINOR_ONLY_VISA_DOCUMENTS else VisaDocumentStatus.PENDING
        for key in VISA_DOCUMENT_LABELS
    }


def checklist_for(player: Player) -> Dict[str, VisaDocumentStatus]:
    """Stored statuses over the default checklist; unknown stored values read as pending."""
    out = default_checklist()
    for key, value in player.visa_documents.items():
        if key not in out:
            continue
        try:
            out[key] = VisaDocumentStatus(value)
        except ValueError:
            out[key] = VisaDocumentStatus.PENDING
    return out


def requires_visa(player: Player) -> bool:
    if player.visa_requires is not None:
        return player.visa_requires
    nationality = (player.nationality or "").lower()
    return not any(n.lower() in nationality for n in EU_NATIONALITIES)


def registration_deadline(player: Player) -> Optional[date]:
    arrival = player.visa_arrival_date or player.program_start_date
    if arrival is None:
        return None
    return arrival + timedelta(days=VISA_REGISTRATION_DAYS)


def is_urgent(player: Player, *, today: date) -> bool:
    if not requires_visa(player):
        return False
    if player.visa_expiry is not None:
        return -VISA_URGENT_DAYS <= (player.visa_expiry - today).days <= VISA_URGENT_DAYS
    deadline = registration_deadline(player)
    if deadline is None:
        return False
    return 0 <= (deadline - today).days <= VISA_URGENT_DAYS


def urgency(player: Player, *, today: date) -> str:
    """'danger' within 14 days, 'warning' within 30, else 'normal'. The visa expiry wins over the deadline."""
    level = "normal"
    days: List[int] = []
    deadline = registration_deadline(player)
    if deadline is not None:
        days.append((deadline - today).days)
    if player.visa_expiry is not None:
        days.append((player.visa_expiry - today).days)
    for remaining in days:
        if remaining <= 14:
            level = "danger"
        elif remaining <= VISA_URGENT_DAYS:
            level = "warning"
    return level


@dataclass(frozen=True)
class ChecklistEntry:
    key: str
    label_en: str
    label_de: str
    status: VisaDocumentStatus
    document: Optional[PlayerDocument] = None


@dataclass(frozen=True)
class VisaRow:
    player: Player
    requires_visa: bool
    is_minor: bool
    application_status: VisaApplicationStatus
    registration_deadline: Optional[date]
    days_to_deadline: Optional[int]
    urgency: str
    checklist: Tuple[ChecklistEntry, ...]
    progress: Tuple[int, int]


@dataclass(frozen=True)
class VisaBoard:
    rows: List[VisaRow]
    total: int
    requiring_visa: int
    urgent: int
    approved: int


class VisaTrackingService:
    def __init__(
        self,
        players: PlayerRepository,
        *,
        documents: DocumentRepository,
        document_service: DocumentService,
        clock: Callable[[], datetime] = now_local,
    ):
        self._players = players
        self._documents = documents
        self._document_service = document_service
        self._clock = clock

    def _today(self) -> date:
        return self._clock().date()

    def _player(self, id: int) -> Player:
        player = self._players.get_by_id(int(id))
        if not player:
            raise NotFoundError("Player not found")
        return player

    def list_visa_documents(self, player_id: int) -> Sequence[PlayerDocument]:
        """Identity documents of the player, newest first."""
        return [d for d in self._documents.list_for_player(int(player_id)) if d.category is DocumentCategory.IDENTITY]

    def _row(self, player: Player, today: date) -> VisaRow:
        age = calculate_age(player.date_of_birth, today=today)
        minor = age is not None and age < 18
        attached: Dict[str, PlayerDocument] = {}
        for document in self.list_visa_documents(player.id):
            if document.document_type:
                attached.setdefault(document.document_type, document)

        entries = []
        for key, status in checklist_for(player).items():
            if key in MINOR_ONLY_VISA_DOCUMENTS and not minor:
                continue
            label_en, label_de = VISA_DOCUMENT_LABELS[key]
            entries.append(ChecklistEntry(key, label_en, label_de, status, attached.get(key)))
        done = sum(1 for e in entries if e.status in (VisaDocumentStatus.RECEIVED, VisaDocumentStatus.NOT_REQUIRED))

        deadline = registration_deadline(player)
        application = VisaApplicationStatus.NOT_STARTED
        if player.visa_status:
            try:
                application = VisaApplicationStatus(player.visa_status)
            except ValueError:
                logger.warning("Player %s has unknown visa status %r", player.player_id, player.visa_status)
        return VisaRow(
            player=player,
            requires_visa=requires_visa(player),
            is_minor=minor,
            application_status=application,
            registration_deadline=deadline,
            days_to_deadline=(deadline - today).days if deadline else None,
            urgency=urgency(player, today=today),
            checklist=tuple(entries),
            progress=(done, len(entries)),
        )

    def board(self, view: Optional[str] = "all") -> VisaBoard:
        view = view or "all"
        if view not in VISA_FILTERS:
            raise ValidationError(f"Invalid filter: {view!r}")
        today = self._today()
        players = self._players.list_players(status=PlayerStatus.ACTIVE)
        needing = [p for p in players if requires_visa(p)]
        urgent = [p for p in needing if is_urgent(p, today=today)]
        shown = {"all": players, "requires_visa": needing, "urgent": urgent}[view]
        return VisaBoard(
            rows=[self._row(p, today) for p in shown],
            total=len(players),
            requiring_visa=len(needing),
            urgent=len(urgent),
            approved=sum(1 for p in needing if p.visa_status == VisaApplicationStatus.APPROVED.value),
        )

    def _save_checklist(self, player: Player, checklist: Dict[str, VisaDocumentStatus]) -> None:
        stored = {key: status.value for key, status in checklist.items()}
        if not self._players.update_player(player.id, {"visa_documents": stored}):
            raise ValidationError("Failed to update document status")

    def cycle_document(self, player_id: int, key: str) -> VisaDocumentStatus:
        if key not in VISA_DOCUMENT_LABELS:
            raise ValidationError(f"Unknown visa document: {key!r}")
        player = self._player(player_id)
        checklist = checklist_for(player)
        checklist[key] = checklist[key].next()
        self._save_checklist(player, checklist)
        return checklist[key]

    def set_application_status(self, player_id: int, status: Any) -> None:
        player = self._player(player_id)
        value = parse_enum(VisaApplicationStatus, status, "visa status")
        if not self._players.update_player(player.id, {"visa_status": value.value}):
            raise ValidationError("Failed to update visa status")
        logger.info("Player %s visa status: %s", player.player_id, value.value)

    def upload_visa_document(
        self, *, player_id: int, key: str, file: Optional[UploadedFile], uploaded_by: int, name: Optional[str] = None
    ) -> int:
        """Store the file as an identity document tagged with the checklist key, then mark the entry received."""
        if key not in VISA_DOCUMENT_LABELS:
            raise ValidationError(f"Unknown visa document: {key!r}")
        player = self._player(player_id)
        document_id = self._document_service.upload(
            player_id=player.id,
            file=file,
            uploaded_by=uploaded_by,
            category=DocumentCategory.IDENTITY,
            name=name,
            document_type=key,
        )
        checklist = checklist_for(player)
        checklist[key] = VisaDocumentStatus.RECEIVED
        self._save_checklist(player, checklist)
        return document_id
