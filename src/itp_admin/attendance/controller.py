from __future__ import annotations

from flask import Flask

from ..common.serialization import to_jsonable
from ..common.web import current_account_id, login_required, ok, request_data
from ..container import Container
from .service import SESSION_TYPE_LABELS


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", endpoint="attendance_page")
    @login_required
    def attendance_page():
        page = container.attendance_service.page()
        return ok(
            today=page.today.isoformat(),
            players=[{"id": p.id, "player_id": p.player_id, "name": p.full_name, "positions": list(p.positions)} for p in page.players],
            history=to_jsonable(page.history),
            week_stats=page.week_stats,
            today_sessions=to_jsonable(page.today_sessions),
            session_types=SESSION_TYPE_LABELS,
        )

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_save")
    @login_required
    def attendance_save():
        session_id = container.attendance_service.save_session(request_data(), recorded_by=current_account_id())
        return ok(session_id=session_id)
