from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import Pickup


class PickupRepository(Protocol):
    def list_pickups(self) -> Sequence[Pickup]:
        raise NotImplementedError

    def get_pickup(self, pickup_id: int) -> Optional[Pickup]:
        raise NotImplementedError

    def create_pickup(self, values: Dict[str, Any]) -> int:
        raise NotImplementedError

    def update_pickup(self, pickup_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_pickup(self, pickup_id: int) -> bool:
        raise NotImplementedError
