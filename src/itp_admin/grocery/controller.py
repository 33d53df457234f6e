from __future__ import annotations

from datetime import date
from io import BytesIO

from flask import Flask, request, send_file

from ..common.excel import XLSX_MIMETYPE
from ..common.serialization import to_jsonable
from ..common.web import current_account_id, login_required, ok, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/grocery-orders", endpoint="grocery_page")
    @login_required
    def grocery_page():
        service = container.grocery_service
        page = service.page(service.parse_filters(request.args))
        return ok(
            filters=to_jsonable(page.filters),
            orders=to_jsonable(page.orders),
            delivery_dates=to_jsonable(page.delivery_dates),
            by_date=to_jsonable(page.by_date),
            by_house=to_jsonable(page.by_house),
            house_totals=to_jsonable(page.house_totals),
            shopping_list=to_jsonable(page.shopping_list),
            stats=page.stats,
            houses=to_jsonable(page.houses),
        )

    @app.route("/api/grocery-orders/<int:order_id>/status", methods=["POST"], endpoint="grocery_status")
    @login_required
    def grocery_status(order_id: int):
        container.grocery_service.update_status(order_id, request_data().get("status"), account_id=current_account_id())
        return ok()

    @app.route("/api/grocery-orders/bulk-status", methods=["POST"], endpoint="grocery_bulk_status")
    @login_required
    def grocery_bulk_status():
        data = request_data()
        count = container.grocery_service.bulk_update_status(
            data.get("order_ids") or [], data.get("status"), account_id=current_account_id()
        )
        return ok(updated=count)

    @app.route("/api/grocery-orders/shopping-list.xlsx", endpoint="grocery_export")
    @login_required
    def grocery_export():
        service = container.grocery_service
        data = service.export_shopping_list(service.parse_filters(request.args))
        return send_file(
            BytesIO(data),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"shopping_list_{date.today().isoformat()}.xlsx",
        )
