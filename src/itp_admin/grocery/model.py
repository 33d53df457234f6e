from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..core.enums import GroceryOrderStatus


@dataclass(frozen=True)
class OrderLine:
    item_id: int
    name: str
    category: str
    quantity: int
    price_at_order: Decimal = Decimal("0")


@dataclass(frozen=True)
class GroceryOrder:
    order_id: int
    player_id: int
    delivery_date: date
    status: GroceryOrderStatus
    total_amount: Decimal = Decimal("0")
    player_name: Optional[str] = None
    house_id: Optional[int] = None
    items: Tuple[OrderLine, ...] = ()
    approved_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    delivered_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ShoppingLine:
    """One catalogue item summed across the selected orders."""

    item_id: int
    name: str
    category: str
    total_quantity: int
    per_player: Tuple[Tuple[str, int], ...] = ()
