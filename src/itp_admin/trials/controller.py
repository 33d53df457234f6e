from __future__ import annotations

from flask import Flask

from ..common.serialization import to_jsonable
from ..common.web import login_required, ok, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/trials", endpoint="trials_list")
    @login_required
    def trials_list():
        return ok(trials=to_jsonable(container.trial_service.list_trials()))

    @app.route("/api/trials", methods=["POST"], endpoint="trials_create")
    @login_required
    def trials_create():
        trial_id = container.trial_service.create_trial(request_data())
        return ok(trial_id=trial_id), 201

    @app.route("/api/trials/<int:trial_id>", methods=["PATCH", "PUT"], endpoint="trials_update")
    @login_required
    def trials_update(trial_id: int):
        container.trial_service.update_trial(trial_id, request_data())
        return ok()

    @app.route("/api/trials/<int:trial_id>", methods=["DELETE"], endpoint="trials_delete")
    @login_required
    def trials_delete(trial_id: int):
        container.trial_service.delete_trial(trial_id)
        return ok()
