from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.validators import optional_str, parse_enum
from ..core.constants import MAX_UPLOAD_BYTES, PLAYER_DOCUMENTS_BUCKET
from ..core.enums import DocumentCategory
from ..core.exceptions import NotFoundError, ValidationError
from ..storage.bucket import BucketStorage
from .model import PlayerDocument
from .repository import DocumentRepository

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9.-]")


def sanitize_filename(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name)


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


class DocumentService:
    def __init__(
        self,
        documents: DocumentRepository,
        storage: BucketStorage,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._documents = documents
        self._storage = storage
        self._clock = clock

    def list_documents(self, player_id: int) -> Sequence[PlayerDocument]:
        return self._documents.list_for_player(int(player_id))

    def upload(
        self,
        *,
        player_id: int,
        file: Optional[UploadedFile],
        uploaded_by: int,
        category=DocumentCategory.OTHER,
        name: Optional[str] = None,
        document_type: Optional[str] = None,
        expiry_date=None,
        description: Optional[str] = None,
    ) -> int:
        if not file or not file.filename or not player_id:
            raise ValidationError("Missing file or player ID")
        if file.size > MAX_UPLOAD_BYTES:
            raise ValidationError("File size must be less than 10MB")

        path = f"{int(player_id)}/{epoch_millis(self._clock())}_{sanitize_filename(file.filename)}"
        self._storage.upload(PLAYER_DOCUMENTS_BUCKET, path, file.data, content_type=file.content_type)

        try:
            document_id = self._documents.create_document(
                {
                    "player_id": int(player_id),
                    "name": optional_str(name) or file.filename,
                    "file_path": path,
                    "file_type": file.content_type,
                    "file_size": file.size,
                    "category": parse_enum(DocumentCategory, category or DocumentCategory.OTHER, "category"),
                    "document_type": optional_str(document_type),
                    "expiry_date": parse_optional_date(expiry_date),
                    "description": optional_str(description),
                    "uploaded_by": int(uploaded_by),
                }
            )
        except Exception:
            # no metadata row, so the stored file would be unreachable
            self._storage.remove(PLAYER_DOCUMENTS_BUCKET, [path])
            raise

        logger.info("Uploaded %s for player %s (%d bytes)", path, player_id, file.size)
        return document_id

    def _get(self, document_id: int) -> PlayerDocument:
        document = self._documents.get_document(int(document_id))
        if not document:
            raise NotFoundError("Document not found")
        return document

    def signed_url(self, document_id: int) -> str:
        document = self._get(document_id)
        return self._storage.create_signed_url(PLAYER_DOCUMENTS_BUCKET, document.file_path)

    def delete(self, document_id: int) -> None:
        document = self._get(document_id)
        self._storage.remove(PLAYER_DOCUMENTS_BUCKET, [document.file_path])
        self._documents.delete_document(document.document_id)
        logger.info("Deleted document %s (%s)", document.document_id, document.file_path)
