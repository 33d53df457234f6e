from __future__ import annotations

from flask import Flask, request

from ..common.formatting import format_file_size
from ..common.serialization import to_jsonable
from ..common.web import current_account_id, login_required, ok
from ..container import Container
from .service import UploadedFile


def _document_payload(document) -> dict:
    payload = to_jsonable(document)
    payload["size_label"] = format_file_size(document.file_size or 0)
    return payload


def register(app: Flask, container: Container) -> None:
    @app.route("/api/players/<int:player_id>/documents", endpoint="documents_list")
    @login_required
    def documents_list(player_id: int):
        documents = container.document_service.list_documents(player_id)
        return ok(documents=[_document_payload(d) for d in documents])

    @app.route("/api/players/<int:player_id>/documents", methods=["POST"], endpoint="documents_upload")
    @login_required
    def documents_upload(player_id: int):
        storage_file = request.files.get("file")
        upload = None
        if storage_file is not None and storage_file.filename:
            upload = UploadedFile(
                filename=storage_file.filename,
                data=storage_file.read(),
                content_type=storage_file.mimetype,
            )
        document_id = container.document_service.upload(
            player_id=player_id,
            file=upload,
            uploaded_by=current_account_id(),
            category=request.form.get("category") or "other",
            name=request.form.get("name"),
            document_type=request.form.get("document_type"),
            expiry_date=request.form.get("expiry_date"),
            description=request.form.get("description"),
        )
        return ok(document_id=document_id), 201

    @app.route("/api/documents/<int:document_id>/url", endpoint="documents_url")
    @login_required
    def documents_url(document_id: int):
        return ok(url=container.document_service.signed_url(document_id))

    @app.route("/api/documents/<int:document_id>", methods=["DELETE"], endpoint="documents_delete")
    @login_required
    def documents_delete(document_id: int):
        container.document_service.delete(document_id)
        return ok()
