from __future__ import annotations

from flask import Flask, request

from ..common.serialization import to_jsonable
from ..common.web import login_required, ok, request_data
from ..container import Container
from ..core.enums import PickupLocationType
from .service import known_locations


def register(app: Flask, container: Container) -> None:
    @app.route("/api/pickups", endpoint="pickups_list")
    @login_required
    def pickups_list():
        pickups = container.pickup_service.list_pickups(request.args.get("status"))
        return ok(pickups=to_jsonable(pickups))

    @app.route("/api/pickups/locations", endpoint="pickups_locations")
    @login_required
    def pickups_locations():
        return ok(locations={t.value: list(known_locations(t)) for t in PickupLocationType})

    @app.route("/api/pickups", methods=["POST"], endpoint="pickups_create")
    @login_required
    def pickups_create():
        pickup_id = container.pickup_service.create_pickup(request_data())
        return ok(pickup_id=pickup_id), 201

    @app.route("/api/pickups/<int:pickup_id>", methods=["PATCH", "PUT"], endpoint="pickups_update")
    @login_required
    def pickups_update(pickup_id: int):
        container.pickup_service.update_pickup(pickup_id, request_data())
        return ok()

    @app.route("/api/pickups/<int:pickup_id>", methods=["DELETE"], endpoint="pickups_delete")
    @login_required
    def pickups_delete(pickup_id: int):
        container.pickup_service.delete_pickup(pickup_id)
        return ok()
