from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import WellPassMembership


class WellPassRepository(Protocol):
    def list_memberships(self) -> Sequence[WellPassMembership]:
        raise NotImplementedError

    def get_membership(self, membership_id: int) -> Optional[WellPassMembership]:
        raise NotImplementedError

    def create_membership(self, values: Dict[str, Any]) -> int:
        raise NotImplementedError

    def update_membership(self, membership_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_membership(self, membership_id: int) -> bool:
        raise NotImplementedError
