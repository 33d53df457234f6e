"""Turn an accepted trial prospect into a roster player.

The steps run against independent stores, so there is no transaction to lean
on. Failures before the player row exists undo the login identity; failures
after it are reported as warnings and leave the player in place.

1. load the prospect and require an email
2. create the player's login identity with a temporary password
3. insert the player under the next free ITP_NNN id
4. copy onboarding documents into the player's document folder
5. mark the prospect as placed
"""

from __future__ import annotations

import logging
import mimetypes
import string
from datetime import datetime
from typing import Callable, List

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_local
from ..common.errors import get_error_message
from ..core.constants import ONBOARDING_BUCKET, PLAYER_DOCUMENTS_BUCKET
from ..core.enums import DocumentCategory, PlayerStatus, ProspectStatus, Role
from ..documents.repository import DocumentRepository
from ..documents.service import epoch_millis
from ..players.model import NewPlayer
from ..players.service import PlayerIdExhaustedError, PlayerService
from ..staff.repository import AccountRepository
from ..storage.bucket import BucketStorage
from .model import ConversionResult, TrialProspect
from .repository import ProspectRepository

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def temporary_password(moment: datetime) -> str:
    return f"ITP{to_base36(epoch_millis(moment))}!"


def conversion_note(prospect: TrialProspect) -> str:
    start = prospect.trial_start_date.isoformat() if prospect.trial_start_date else "N/A"
    end = prospect.trial_end_date.isoformat() if prospect.trial_end_date else "N/A"
    return f"Converted from trial prospect. Trial: {start} - {end}"


def player_from_prospect(prospect: TrialProspect, *, account_id: int) -> NewPlayer:
    return NewPlayer(
        player_id="",
        account_id=account_id,
        first_name=prospect.first_name,
        last_name=prospect.last_name,
        date_of_birth=prospect.date_of_birth,
        positions=(prospect.position,) if prospect.position else (),
        nationality=prospect.nationality,
        passports=prospect.nationality,
        email=prospect.email,
        phone=prospect.whatsapp_number or prospect.phone or None,
        parent1_name=prospect.parent_name or None,
        parent1_email=prospect.parent_contact or None,
        height_cm=prospect.height_cm or None,
        video_url=prospect.video_url or None,
        status=PlayerStatus.PENDING,
        notes=conversion_note(prospect),
    )


def document_category(doc_type: str) -> DocumentCategory:
    return DocumentCategory.IDENTITY if "passport" in doc_type else DocumentCategory.CONSENT


def file_extension(path: str) -> str:
    ext = path.rsplit(".", 1)[-1] if "." in path else ""
    return ext or "pdf"


class ProspectConversionService:
    def __init__(
        self,
        *,
        prospects: ProspectRepository,
        accounts: AccountRepository,
        player_service: PlayerService,
        documents: DocumentRepository,
        storage: BucketStorage,
        clock: Callable[[], datetime] = now_local,
    ):
        self._prospects = prospects
        self._accounts = accounts
        self._player_service = player_service
        self._documents = documents
        self._storage = storage
        self._clock = clock

    def convert(self, prospect_id: int, *, converted_by: int) -> ConversionResult:
        prospect = self._prospects.get_prospect(int(prospect_id))
        if not prospect:
            return ConversionResult(success=False, error="Prospect not found")
        if not prospect.email:
            return ConversionResult(
                success=False,
                error="Player email is required for account creation. Please add an email address first.",
            )

        logger.info("Converting prospect %s (%s)", prospect.prospect_id, prospect.full_name)
        try:
            account_id = self._accounts.create_account(
                email=prospect.email,
                password_hash=generate_password_hash(temporary_password(self._clock())),
                full_name=prospect.full_name,
                role=Role.PLAYER,
                must_change_password=True,
            )
        except Exception as e:
            logger.warning("Prospect %s: account creation failed: %s", prospect.prospect_id, e)
            return ConversionResult(success=False, error=f"Auth creation failed: {get_error_message(e)}")
        logger.info("Prospect %s: created account %s", prospect.prospect_id, account_id)

        try:
            player_row_id, player_code = self._player_service.insert_with_next_id(
                player_from_prospect(prospect, account_id=account_id)
            )
        except PlayerIdExhaustedError as e:
            self._remove_account(account_id)
            return ConversionResult(success=False, error=str(e))
        except Exception as e:
            logger.exception("Prospect %s: player insert failed", prospect.prospect_id)
            self._remove_account(account_id)
            return ConversionResult(success=False, error=f"Player creation failed: {get_error_message(e)}")
        logger.info("Prospect %s: created player %s (row %s)", prospect.prospect_id, player_code, player_row_id)

        doc_errors = self._copy_documents(prospect, player_row_id=player_row_id, uploaded_by=converted_by)

        try:
            placed = self._prospects.set_status(prospect.prospect_id, ProspectStatus.PLACED)
        except Exception:
            logger.exception("Prospect %s: status update failed", prospect.prospect_id)
            placed = False

        if not placed:
            warning = 'Player created but prospect status update failed. Please manually set status to "placed".'
            if doc_errors:
                warning += f" Document issues: {', '.join(doc_errors)}"
            return ConversionResult(success=True, player_row_id=player_row_id, player_id=player_code, warning=warning)

        if doc_errors:
            return ConversionResult(
                success=True,
                player_row_id=player_row_id,
                player_id=player_code,
                warning=(
                    f"Player created. Some documents failed to copy: {', '.join(doc_errors)}. "
                    "You can re-upload them on the player page."
                ),
            )

        logger.info("Prospect %s placed as %s", prospect.prospect_id, player_code)
        return ConversionResult(success=True, player_row_id=player_row_id, player_id=player_code)

    def _remove_account(self, account_id: int) -> None:
        try:
            self._accounts.delete_by_id(account_id)
        except Exception:
            logger.exception("Could not remove account %s after failed conversion", account_id)
            return
        logger.info("Removed account %s after failed conversion", account_id)

    def _copy_documents(self, prospect: TrialProspect, *, player_row_id: int, uploaded_by: int) -> List[str]:
        errors: List[str] = []
        for doc_type, source_path in prospect.onboarding_documents().items():
            try:
                self._copy_document(doc_type, source_path, player_row_id=player_row_id, uploaded_by=uploaded_by, errors=errors)
            except Exception:
                logger.exception("Prospect %s: copying %s failed", prospect.prospect_id, doc_type)
                errors.append(f"{doc_type}: unexpected error")
        return errors

    def _copy_document(self, doc_type: str, source_path: str, *, player_row_id: int, uploaded_by: int, errors: List[str]) -> None:
        try:
            data = self._storage.download(ONBOARDING_BUCKET, source_path)
        except Exception as e:
            logger.warning("Download of %s failed: %s", source_path, e)
            errors.append(f"{doc_type}: download failed")
            return

        content_type = mimetypes.guess_type(source_path)[0]
        dest_path = f"{player_row_id}/{doc_type}_{epoch_millis(self._clock())}.{file_extension(source_path)}"
        try:
            self._storage.upload(PLAYER_DOCUMENTS_BUCKET, dest_path, data, content_type=content_type)
        except Exception as e:
            logger.warning("Upload of %s failed: %s", dest_path, e)
            errors.append(f"{doc_type}: upload failed")
            return

        try:
            self._documents.create_document(
                {
                    "player_id": player_row_id,
                    "name": f"{doc_type.replace('_', ' ')} (from trial)",
                    "file_path": dest_path,
                    "file_type": content_type,
                    "file_size": len(data),
                    "category": document_category(doc_type),
                    "document_type": doc_type,
                    "uploaded_by": uploaded_by,
                }
            )
        except Exception as e:
            logger.warning("Document record for %s failed: %s", dest_path, e)
            self._storage.remove(PLAYER_DOCUMENTS_BUCKET, [dest_path])
            errors.append(f"{doc_type}: record creation failed")
            return
        logger.info("Copied %s to %s", source_path, dest_path)
