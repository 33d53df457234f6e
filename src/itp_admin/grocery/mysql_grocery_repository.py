from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import GroceryOrderStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, in_clause
from .model import GroceryOrder, OrderLine
from .repository import GroceryOrderRepository

UPDATABLE_COLUMNS = ("status", "approved_at", "approved_by", "delivered_at")

_SELECT = """
    SELECT o.*, CONCAT(p.first_name, ' ', p.last_name) AS player_name, p.house_id
    FROM grocery_orders o
    LEFT JOIN players p ON p.id = o.player_id
"""


def _to_order(row: dict) -> GroceryOrder:
    return GroceryOrder(
        order_id=int(row["order_id"]),
        player_id=int(row["player_id"]),
        delivery_date=row["delivery_date"],
        status=GroceryOrderStatus(row["status"]),
        total_amount=Decimal(row.get("total_amount") or 0),
        player_name=row.get("player_name"),
        house_id=int(row["house_id"]) if row.get("house_id") is not None else None,
        approved_at=row.get("approved_at"),
        approved_by=int(row["approved_by"]) if row.get("approved_by") is not None else None,
        delivered_at=row.get("delivered_at"),
        created_at=row.get("created_at"),
    )


class MySQLGroceryOrderRepository(GroceryOrderRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _with_lines(self, cur, orders: List[GroceryOrder]) -> List[GroceryOrder]:
        if not orders:
            return orders
        placeholders, params = in_clause([o.order_id for o in orders])
        cur.execute(
            f"""
            SELECT l.order_id, l.item_id, l.quantity, l.price_at_order, i.name, i.category
            FROM grocery_order_items l
            JOIN grocery_items i ON i.item_id = l.item_id
            WHERE l.order_id IN ({placeholders})
            """,
            params,
        )
        lines: Dict[int, List[OrderLine]] = {}
        for row in fetchall(cur):
            lines.setdefault(int(row["order_id"]), []).append(
                OrderLine(
                    item_id=int(row["item_id"]),
                    name=row["name"],
                    category=row["category"],
                    quantity=int(row["quantity"]),
                    price_at_order=Decimal(row.get("price_at_order") or 0),
                )
            )
        return [replace(o, items=tuple(lines.get(o.order_id, ()))) for o in orders]

    def list_orders(self) -> Sequence[GroceryOrder]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY o.delivery_date ASC, o.created_at DESC")
            return self._with_lines(cur, [_to_order(r) for r in fetchall(cur)])

    def get_order(self, order_id: int) -> Optional[GroceryOrder]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE o.order_id=%s", (order_id,))
            rows = fetchall(cur)
            if not rows:
                return None
            return self._with_lines(cur, [_to_order(rows[0])])[0]

    def update_orders(self, order_ids: Sequence[int], changes: Dict[str, Any]) -> int:
        set_clause, params = build_update(changes, UPDATABLE_COLUMNS)
        if not set_clause or not order_ids:
            return 0
        placeholders, id_params = in_clause(order_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE grocery_orders SET {set_clause} WHERE order_id IN ({placeholders})", (*params, *id_params))
            return cur.rowcount
