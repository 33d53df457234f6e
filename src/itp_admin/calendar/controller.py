from __future__ import annotations

from flask import Flask, request

from ..common.serialization import to_jsonable
from ..common.web import login_required, ok, request_data
from ..container import Container
from . import view_model


def register(app: Flask, container: Container) -> None:
    @app.route("/api/calendar", endpoint="calendar_page")
    @login_required
    def calendar_page():
        page = container.calendar_service.page(
            mode=request.args.get("view", view_model.MONTH),
            current=request.args.get("date"),
            selected=request.args.get("selected"),
        )
        step = {"prev": view_model.navigate(page.current, page.mode, -1), "next": view_model.navigate(page.current, page.mode, 1)}
        return ok(
            view=page.mode,
            date=page.current.isoformat(),
            selected=page.selected.isoformat(),
            header=page.header,
            range={"start": page.start.isoformat(), "end": page.end.isoformat()},
            navigation=to_jsonable(step),
            events=to_jsonable(page.events),
            grid=to_jsonable(page.grid),
            compliance=to_jsonable(page.compliance),
            players=[{"id": p.id, "player_id": p.player_id, "name": p.full_name} for p in page.players],
        )

    @app.route("/api/calendar/events", methods=["POST"], endpoint="calendar_create")
    @login_required
    def calendar_create():
        ids = container.calendar_service.create_event(request_data())
        return ok(event_id=ids[0], event_ids=ids), 201

    @app.route("/api/calendar/events/<int:event_id>", endpoint="calendar_detail")
    @login_required
    def calendar_detail(event_id: int):
        return ok(event=to_jsonable(container.calendar_service.get_event(event_id)))

    @app.route("/api/calendar/events/<int:event_id>", methods=["PATCH", "PUT"], endpoint="calendar_update")
    @login_required
    def calendar_update(event_id: int):
        data = request_data()
        count = container.calendar_service.update_event(event_id, data, scope=data.get("scope") or request.args.get("scope"))
        return ok(updated=count)

    @app.route("/api/calendar/events/<int:event_id>", methods=["DELETE"], endpoint="calendar_delete")
    @login_required
    def calendar_delete(event_id: int):
        count = container.calendar_service.delete_event(event_id, scope=request.args.get("scope"))
        return ok(deleted=count)
