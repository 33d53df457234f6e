from __future__ import annotations

from flask import Flask, request

from ..common.serialization import to_jsonable
from ..common.web import current_account_id, login_required, ok, request_data
from ..container import Container
from ..documents.service import UploadedFile


def _row_payload(row) -> dict:
    payload = to_jsonable(row)
    payload["player"]["full_name"] = row.player.full_name
    return payload


def register(app: Flask, container: Container) -> None:
    @app.route("/api/visa", endpoint="visa_board")
    @login_required
    def visa_board():
        board = container.visa_service.board(request.args.get("filter", "all"))
        return ok(
            players=[_row_payload(r) for r in board.rows],
            counts={
                "total": board.total,
                "requires_visa": board.requiring_visa,
                "urgent": board.urgent,
                "approved": board.approved,
            },
        )

    @app.route("/api/visa/<int:player_id>/documents/<key>/cycle", methods=["POST"], endpoint="visa_cycle_document")
    @login_required
    def visa_cycle_document(player_id: int, key: str):
        status = container.visa_service.cycle_document(player_id, key)
        return ok(status=status.value)

    @app.route("/api/visa/<int:player_id>/status", methods=["POST", "PUT"], endpoint="visa_set_status")
    @login_required
    def visa_set_status(player_id: int):
        container.visa_service.set_application_status(player_id, request_data().get("status"))
        return ok()

    @app.route("/api/visa/<int:player_id>/documents", endpoint="visa_documents_list")
    @login_required
    def visa_documents_list(player_id: int):
        return ok(documents=to_jsonable(container.visa_service.list_visa_documents(player_id)))

    @app.route("/api/visa/<int:player_id>/documents/<key>", methods=["POST"], endpoint="visa_documents_upload")
    @login_required
    def visa_documents_upload(player_id: int, key: str):
        storage_file = request.files.get("file")
        upload = None
        if storage_file is not None and storage_file.filename:
            upload = UploadedFile(filename=storage_file.filename, data=storage_file.read(), content_type=storage_file.mimetype)
        document_id = container.visa_service.upload_visa_document(
            player_id=player_id,
            key=key,
            file=upload,
            uploaded_by=current_account_id(),
            name=request.form.get("name"),
        )
        return ok(document_id=document_id), 201
