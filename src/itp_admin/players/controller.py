from __future__ import annotations

from datetime import date
from io import BytesIO

from flask import Flask, request, send_file

from ..common.excel import XLSX_MIMETYPE
from ..common.serialization import to_jsonable
from ..common.web import current_role, login_required, ok, request_data
from ..container import Container


def player_payload(player) -> dict:
    payload = to_jsonable(player)
    payload["full_name"] = player.full_name
    return payload


def register(app: Flask, container: Container) -> None:
    @app.route("/api/players", endpoint="players_list")
    @login_required
    def players_list():
        players = container.player_service.list_roster(
            status=request.args.get("status", "all"),
            search=request.args.get("search"),
        )
        return ok(players=[player_payload(p) for p in players], total=len(players))

    @app.route("/api/players/export", endpoint="players_export")
    @login_required
    def players_export():
        data = container.player_service.export_roster(status=request.args.get("status", "all"))
        return send_file(
            BytesIO(data),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"roster_{date.today().isoformat()}.xlsx",
        )

    @app.route("/api/players/<int:id>", endpoint="players_detail")
    @login_required
    def players_detail(id: int):
        player = container.player_service.get_player(id)
        documents = container.document_service.list_documents(player.id)
        return ok(player=player_payload(player), documents=to_jsonable(documents))

    @app.route("/api/players", methods=["POST"], endpoint="players_create")
    @login_required
    def players_create():
        id, player_id = container.player_service.create_player(request_data())
        return ok(id=id, player_id=player_id), 201

    @app.route("/api/players/<int:id>", methods=["PATCH", "PUT"], endpoint="players_update")
    @login_required
    def players_update(id: int):
        container.player_service.update_player(id, request_data())
        return ok()

    @app.route("/api/players/<int:id>", methods=["DELETE"], endpoint="players_delete")
    @login_required
    def players_delete(id: int):
        hard = request.args.get("hard", "0").lower() in {"1", "true", "yes"}
        container.player_service.delete_player(current_role=current_role(), id=id, hard=hard)
        return ok()

    @app.route("/api/players/whereabouts", endpoint="players_whereabouts")
    @login_required
    def players_whereabouts():
        groups = container.whereabouts_service.board(request.args.get("status"))
        return ok(
            groups=[
                {
                    "status": g.status.value,
                    "label": g.label,
                    "count": g.count,
                    "players": [
                        {**player_payload(e.player), "return_info": e.return_info, "location_info": e.location_info}
                        for e in g.entries
                    ],
                }
                for g in groups
            ]
        )

    @app.route("/api/players/<int:id>/whereabouts", methods=["POST", "PUT"], endpoint="players_whereabouts_update")
    @login_required
    def players_whereabouts_update(id: int):
        container.whereabouts_service.update(id, request_data())
        return ok()
