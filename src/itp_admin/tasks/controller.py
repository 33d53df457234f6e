from __future__ import annotations

from flask import Flask, request

from ..common.formatting import priority_badge, status_badge
from ..common.serialization import to_jsonable
from ..common.web import current_account_id, login_required, ok, request_data
from ..container import Container


def _task_payload(task) -> dict:
    payload = to_jsonable(task)
    payload["status_badge"] = status_badge(task.status)
    payload["priority_badge"] = priority_badge(task.priority)
    return payload


def register(app: Flask, container: Container) -> None:
    @app.route("/api/tasks", endpoint="tasks_list")
    @login_required
    def tasks_list():
        board = container.task_service.board(
            task_filter=request.args.get("filter", "all"),
            current_account_id=current_account_id(),
        )
        players = container.player_service.list_roster(status="all")
        return ok(
            tasks=[_task_payload(t) for t in board.tasks],
            counts=board.counts,
            filter=board.filter,
            players=[{"id": p.id, "player_id": p.player_id, "full_name": p.full_name} for p in players],
        )

    @app.route("/api/tasks", methods=["POST"], endpoint="tasks_create")
    @login_required
    def tasks_create():
        task_id = container.task_service.create_task(created_by=current_account_id(), data=request_data())
        return ok(task_id=task_id), 201

    @app.route("/api/tasks/<int:task_id>", methods=["PATCH", "PUT"], endpoint="tasks_update")
    @login_required
    def tasks_update(task_id: int):
        container.task_service.update_task(task_id, request_data())
        return ok()

    @app.route("/api/tasks/<int:task_id>/advance", methods=["POST"], endpoint="tasks_advance")
    @login_required
    def tasks_advance(task_id: int):
        status = container.task_service.advance(task_id)
        return ok(status=status.value)

    @app.route("/api/tasks/<int:task_id>/status", methods=["POST"], endpoint="tasks_set_status")
    @login_required
    def tasks_set_status(task_id: int):
        status = container.task_service.set_status(task_id, request_data().get("status"))
        return ok(status=status.value)

    @app.route("/api/tasks/<int:task_id>", methods=["DELETE"], endpoint="tasks_delete")
    @login_required
    def tasks_delete(task_id: int):
        container.task_service.delete_task(task_id)
        return ok()
