from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.excel import rows_to_xlsx
from ..common.validators import parse_enum
from ..core.constants import GROCERY_CATEGORY_LABELS, GROCERY_CATEGORY_ORDER
from ..core.enums import GroceryOrderStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..housing.model import House
from ..housing.repository import HousingRepository
from .model import GroceryOrder, ShoppingLine
from .repository import GroceryOrderRepository

logger = logging.getLogger(__name__)

ALL = "all"
UNASSIGNED = "unassigned"

SHOPPING_LIST_COLUMNS = ("Category", "Item", "Quantity", "Players")


@dataclass(frozen=True)
class OrderFilters:
    status: str = ALL
    delivery_date: str = ALL
    house: str = ALL
    start: Optional[date] = None
    end: Optional[date] = None


@dataclass(frozen=True)
class GroceryPage:
    filters: OrderFilters
    orders: Sequence[GroceryOrder]
    delivery_dates: Sequence[date]
    by_date: Dict[date, Dict[str, List[GroceryOrder]]]
    by_house: Dict[str, List[GroceryOrder]]
    house_totals: Dict[str, Decimal]
    shopping_list: Sequence[ShoppingLine]
    stats: Dict[str, int]
    houses: Sequence[House]


def filter_orders(orders: Sequence[GroceryOrder], filters: OrderFilters) -> List[GroceryOrder]:
    """`all` leaves a dimension unfiltered."""
    out = []
    for order in orders:
        if filters.status != ALL and order.status.value != filters.status:
            continue
        if filters.delivery_date != ALL and order.delivery_date.isoformat() != filters.delivery_date:
            continue
        if filters.house != ALL and house_key(order) != filters.house:
            continue
        if filters.start and order.delivery_date < filters.start:
            continue
        if filters.end and order.delivery_date > filters.end:
            continue
        out.append(order)
    return out


def house_key(order: GroceryOrder) -> str:
    return str(order.house_id) if order.house_id is not None else UNASSIGNED


def group_by_house(orders: Sequence[GroceryOrder]) -> Dict[str, List[GroceryOrder]]:
    grouped: Dict[str, List[GroceryOrder]] = {}
    for order in orders:
        grouped.setdefault(house_key(order), []).append(order)
    return grouped


def group_by_date(orders: Sequence[GroceryOrder]) -> Dict[date, Dict[str, List[GroceryOrder]]]:
    """Delivery date, then house."""
    dates: Dict[date, List[GroceryOrder]] = {}
    for order in orders:
        dates.setdefault(order.delivery_date, []).append(order)
    return {d: group_by_house(dates[d]) for d in sorted(dates)}


def order_total(orders: Sequence[GroceryOrder]) -> Decimal:
    return sum((o.total_amount for o in orders), Decimal("0"))


def _category_rank(category: str) -> int:
    try:
        return GROCERY_CATEGORY_ORDER.index(category)
    except ValueError:
        return len(GROCERY_CATEGORY_ORDER)


def consolidate(orders: Sequence[GroceryOrder]) -> List[ShoppingLine]:
    """Sum quantities per item, keeping who ordered how many."""
    totals: Dict[int, Dict[str, Any]] = {}
    for order in orders:
        player = order.player_name or "Unknown"
        for line in order.items:
            entry = totals.setdefault(
                line.item_id,
                {"name": line.name, "category": line.category, "quantity": 0, "per_player": []},
            )
            entry["quantity"] += line.quantity
            entry["per_player"].append((player, line.quantity))

    lines = [
        ShoppingLine(
            item_id=item_id,
            name=e["name"],
            category=e["category"],
            total_quantity=e["quantity"],
            per_player=tuple(e["per_player"]),
        )
        for item_id, e in totals.items()
    ]
    lines.sort(key=lambda l: (_category_rank(l.category), l.name.lower()))
    return lines


def order_stats(orders: Sequence[GroceryOrder]) -> Dict[str, int]:
    stats = {"total": len(orders)}
    for status in GroceryOrderStatus:
        stats[status.value] = sum(1 for o in orders if o.status == status)
    return stats


def status_changes(status: GroceryOrderStatus, *, account_id: int, now: datetime) -> Dict[str, Any]:
    changes: Dict[str, Any] = {"status": status}
    if status == GroceryOrderStatus.APPROVED:
        changes.update(approved_at=now, approved_by=account_id)
    elif status == GroceryOrderStatus.DELIVERED:
        changes["delivered_at"] = now
    return changes


class GroceryService:
    def __init__(
        self,
        orders: GroceryOrderRepository,
        *,
        housing: HousingRepository,
        clock: Callable[[], datetime] = now_local,
    ):
        self._orders = orders
        self._housing = housing
        self._clock = clock

    @staticmethod
    def parse_filters(args: Dict[str, Any]) -> OrderFilters:
        status = args.get("status") or ALL
        if status != ALL:
            status = parse_enum(GroceryOrderStatus, status, "status").value
        delivery_date = args.get("date") or ALL
        if delivery_date != ALL:
            delivery_date = parse_optional_date(delivery_date).isoformat()
        start = parse_optional_date(args.get("start"))
        end = parse_optional_date(args.get("end"))
        if start and end and end < start:
            raise ValidationError("End date cannot be before start date")
        return OrderFilters(status=status, delivery_date=delivery_date, house=str(args.get("house") or ALL), start=start, end=end)

    def page(self, filters: OrderFilters) -> GroceryPage:
        orders = list(self._orders.list_orders())
        shown = filter_orders(orders, filters)
        by_house = group_by_house(shown)
        return GroceryPage(
            filters=filters,
            orders=shown,
            delivery_dates=sorted({o.delivery_date for o in orders}),
            by_date=group_by_date(shown),
            by_house=by_house,
            house_totals={k: order_total(v) for k, v in by_house.items()},
            shopping_list=consolidate(shown),
            stats=order_stats(orders),
            houses=self._housing.list_houses(),
        )

    def update_status(self, order_id: int, status, *, account_id: int) -> None:
        status = parse_enum(GroceryOrderStatus, status, "status")
        order = self._orders.get_order(int(order_id))
        if not order:
            raise NotFoundError("Order not found")
        self._orders.update_orders([order.order_id], status_changes(status, account_id=account_id, now=self._clock()))
        logger.info("Grocery order %s: %s -> %s", order.order_id, order.status.value, status.value)

    def bulk_update_status(self, order_ids: Sequence[int], status, *, account_id: int) -> int:
        status = parse_enum(GroceryOrderStatus, status, "status")
        try:
            ids = sorted({int(i) for i in order_ids or []})
        except (TypeError, ValueError):
            raise ValidationError("Order ids must be numbers")
        if not ids:
            raise ValidationError("Select at least one order")
        count = self._orders.update_orders(ids, status_changes(status, account_id=account_id, now=self._clock()))
        logger.info("Bulk grocery update: %d orders -> %s", len(ids), status.value)
        return count

    def export_shopping_list(self, filters: OrderFilters) -> bytes:
        lines = consolidate(filter_orders(self._orders.list_orders(), filters))
        rows = [
            {
                "Category": GROCERY_CATEGORY_LABELS.get(l.category, l.category),
                "Item": l.name,
                "Quantity": l.total_quantity,
                "Players": ", ".join(f"{name} ({qty})" for name, qty in l.per_player),
            }
            for l in lines
        ]
        return rows_to_xlsx(rows, sheet_name="Shopping List", columns=SHOPPING_LIST_COLUMNS)
