from __future__ import annotations

from flask import Flask

from ..common.serialization import to_jsonable
from ..common.web import login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        return ok(**to_jsonable(container.dashboard_service.load()))
