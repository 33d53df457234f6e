from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from ..core.enums import PlayerStatus
from .model import NewPlayer, Player


class PlayerRepository(Protocol):
    def get_by_id(self, id: int) -> Optional[Player]:
        raise NotImplementedError

    def get_by_player_id(self, player_id: str) -> Optional[Player]:
        raise NotImplementedError

    def list_players(
        self,
        *,
        status: Optional[PlayerStatus] = None,
        search: Optional[str] = None,
        house_id: Optional[int] = None,
    ) -> Sequence[Player]:
        raise NotImplementedError

    def last_issued_player_id(self) -> Optional[str]:
        """Most recently created `ITP_%` id."""
        raise NotImplementedError

    def create_player(self, player: NewPlayer) -> int:
        """Insert and return the row id. Raises DuplicateKeyError on a unique-key collision."""
        raise NotImplementedError

    def update_player(self, id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_player(self, id: int) -> bool:
        raise NotImplementedError
