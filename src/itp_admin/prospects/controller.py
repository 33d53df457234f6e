from __future__ import annotations

import logging

from flask import Flask, request

from ..common.serialization import to_jsonable
from ..common.web import current_account_id, login_required, ok, request_data
from ..container import Container
from ..documents.service import UploadedFile

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/prospects", endpoint="prospects_list")
    @login_required
    def prospects_list():
        pipeline = container.prospect_service.pipeline(
            status=request.args.get("status"),
            search=request.args.get("search"),
        )
        return ok(prospects=to_jsonable(pipeline.prospects), counts=pipeline.counts)

    @app.route("/api/prospects", methods=["POST"], endpoint="prospects_create")
    @login_required
    def prospects_create():
        prospect_id = container.prospect_service.create_prospect(request_data())
        return ok(prospect_id=prospect_id), 201

    @app.route("/api/prospects/<int:prospect_id>", endpoint="prospects_detail")
    @login_required
    def prospects_detail(prospect_id: int):
        prospect = container.prospect_service.get_prospect(prospect_id)
        return ok(prospect=to_jsonable(prospect), documents=prospect.onboarding_documents())

    @app.route("/api/prospects/<int:prospect_id>", methods=["PATCH", "PUT"], endpoint="prospects_update")
    @login_required
    def prospects_update(prospect_id: int):
        container.prospect_service.update_prospect(prospect_id, request_data())
        return ok()

    @app.route("/api/prospects/<int:prospect_id>/status", methods=["POST"], endpoint="prospects_status")
    @login_required
    def prospects_status(prospect_id: int):
        container.prospect_service.set_status(prospect_id, request_data().get("status"))
        return ok()

    @app.route("/api/prospects/<int:prospect_id>", methods=["DELETE"], endpoint="prospects_delete")
    @login_required
    def prospects_delete(prospect_id: int):
        container.prospect_service.delete_prospect(prospect_id)
        return ok()

    @app.route("/api/prospects/<int:prospect_id>/documents/<doc_type>", methods=["POST"], endpoint="prospects_upload")
    @login_required
    def prospects_upload(prospect_id: int, doc_type: str):
        storage_file = request.files.get("file")
        upload = None
        if storage_file is not None and storage_file.filename:
            upload = UploadedFile(storage_file.filename, storage_file.read(), storage_file.mimetype)
        path = container.prospect_service.upload_onboarding_document(prospect_id, doc_type, upload)
        return ok(file_path=path), 201

    @app.route("/api/prospects/documents/url", endpoint="prospects_document_url")
    @login_required
    def prospects_document_url():
        return ok(url=container.prospect_service.onboarding_document_url(request.args.get("path", "")))

    @app.route("/api/prospects/<int:prospect_id>/convert", methods=["POST"], endpoint="prospects_convert")
    @login_required
    def prospects_convert(prospect_id: int):
        result = container.conversion_service.convert(prospect_id, converted_by=current_account_id())
        if not result.success:
            logger.info("Conversion of prospect %s failed: %s", prospect_id, result.error)
            return {"success": False, "message": result.error}, 400
        return ok(player_id=result.player_id, player_row_id=result.player_row_id, warning=result.warning)
