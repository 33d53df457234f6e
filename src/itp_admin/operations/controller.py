from __future__ import annotations

from flask import Flask

from ..common.serialization import to_jsonable
from ..common.web import login_required, ok, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/operations", endpoint="operations_page")
    @login_required
    def operations_page():
        return ok(**to_jsonable(container.operations_service.overview()))

    @app.route("/api/operations/wellpass", methods=["POST"], endpoint="wellpass_create")
    @login_required
    def wellpass_create():
        membership_id = container.operations_service.create_membership(request_data())
        return ok(membership_id=membership_id), 201

    @app.route("/api/operations/wellpass/<int:membership_id>", methods=["PATCH", "PUT"], endpoint="wellpass_update")
    @login_required
    def wellpass_update(membership_id: int):
        container.operations_service.update_membership(membership_id, request_data())
        return ok()

    @app.route("/api/operations/wellpass/<int:membership_id>", methods=["DELETE"], endpoint="wellpass_delete")
    @login_required
    def wellpass_delete(membership_id: int):
        container.operations_service.delete_membership(membership_id)
        return ok()
