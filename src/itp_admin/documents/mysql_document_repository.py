from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import DocumentCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, insert_row
from .model import PlayerDocument
from .repository import DocumentRepository

COLUMNS = (
    "player_id",
    "name",
    "file_path",
    "file_type",
    "file_size",
    "category",
    "document_type",
    "expiry_date",
    "description",
    "uploaded_by",
)


def _to_document(row: dict) -> PlayerDocument:
    return PlayerDocument(
        document_id=int(row["document_id"]),
        player_id=int(row["player_id"]),
        name=row["name"],
        file_path=row["file_path"],
        file_type=row.get("file_type"),
        file_size=int(row["file_size"]) if row.get("file_size") is not None else None,
        category=DocumentCategory(row["category"]),
        document_type=row.get("document_type"),
        expiry_date=row.get("expiry_date"),
        description=row.get("description"),
        uploaded_by=int(row["uploaded_by"]) if row.get("uploaded_by") is not None else None,
        created_at=row.get("created_at"),
    )


class MySQLDocumentRepository(DocumentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_player(self, player_id: int) -> Sequence[PlayerDocument]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM player_documents WHERE player_id=%s ORDER BY created_at DESC, document_id DESC",
                (player_id,),
            )
            return [_to_document(r) for r in fetchall(cur)]

    def get_document(self, document_id: int) -> Optional[PlayerDocument]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM player_documents WHERE document_id=%s", (document_id,))
            row = fetchone(cur)
            return _to_document(row) if row else None

    def create_document(self, values: Dict[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "player_documents", values, COLUMNS)

    def delete_document(self, document_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM player_documents WHERE document_id=%s", (document_id,))
            return cur.rowcount > 0
