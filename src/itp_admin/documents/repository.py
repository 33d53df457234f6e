from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import PlayerDocument


class DocumentRepository(Protocol):
    def list_for_player(self, player_id: int) -> Sequence[PlayerDocument]:
        raise NotImplementedError

    def get_document(self, document_id: int) -> Optional[PlayerDocument]:
        raise NotImplementedError

    def create_document(self, values: Dict[str, Any]) -> int:
        raise NotImplementedError

    def delete_document(self, document_id: int) -> bool:
        raise NotImplementedError
