from __future__ import annotations

from flask import Flask, session

from ..common.serialization import to_jsonable
from ..common.web import current_account_id, current_role, login_required, ok, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/bug-reports", endpoint="bug_reports_list")
    @login_required
    def bug_reports_list():
        return ok(reports=to_jsonable(container.bug_report_service.list_reports()))

    @app.route("/api/bug-reports", methods=["POST"], endpoint="bug_reports_create")
    @login_required
    def bug_reports_create():
        data = request_data()
        report_id = container.bug_report_service.report_bug(
            title=data.get("title"),
            description=data.get("description"),
            page_url=data.get("page_url"),
            reported_by=current_account_id(),
            reporter_name=session.get("name"),
        )
        return ok(report_id=report_id), 201

    @app.route("/api/bug-reports/<int:report_id>/status", methods=["POST"], endpoint="bug_reports_status")
    @login_required
    def bug_reports_status(report_id: int):
        container.bug_report_service.change_status(
            current_role=current_role(),
            report_id=report_id,
            status=request_data().get("status"),
        )
        return ok()
