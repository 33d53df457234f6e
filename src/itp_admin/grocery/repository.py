from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import GroceryOrder


class GroceryOrderRepository(Protocol):
    def list_orders(self) -> Sequence[GroceryOrder]:
        """Orders with their lines, player name and house, by delivery date."""
        raise NotImplementedError

    def get_order(self, order_id: int) -> Optional[GroceryOrder]:
        raise NotImplementedError

    def update_orders(self, order_ids: Sequence[int], changes: Dict[str, Any]) -> int:
        raise NotImplementedError
