from __future__ import annotations

from datetime import date, datetime
from io import BytesIO

import pytest

from itp_admin.core.constants import PLAYER_DOCUMENTS_BUCKET
from itp_admin.core.enums import DocumentCategory
from itp_admin.core.exceptions import NotFoundError, ValidationError
from itp_admin.documents.model import PlayerDocument
from itp_admin.documents.service import DocumentService, UploadedFile, epoch_millis, sanitize_filename

NOW = datetime(2024, 3, 15, 9, 0, 0)


class FakeDocumentRepo:
    def __init__(self, fail_insert: bool = False):
        self.rows = {}
        self.fail_insert = fail_insert

    def list_for_player(self, player_id):
        return [d for d in self.rows.values() if d.player_id == player_id]

    def get_document(self, document_id):
        return self.rows.get(document_id)

    def create_document(self, values):
        if self.fail_insert:
            raise RuntimeError("insert failed")
        document_id = len(self.rows) + 1
        self.rows[document_id] = PlayerDocument(document_id=document_id, created_at=NOW, **values)
        return document_id

    def delete_document(self, document_id):
        return self.rows.pop(document_id, None) is not None


def test_sanitize_filename():
    assert sanitize_filename("Pass port (1).pdf") == "Pass_port__1_.pdf"
    assert sanitize_filename("visa-2024.PNG") == "visa-2024.PNG"


def test_upload_stores_file_and_row(storage, clock):
    repo = FakeDocumentRepo()
    service = DocumentService(repo, storage, clock=clock)

    document_id = service.upload(
        player_id=3,
        file=UploadedFile("my passport.pdf", b"%PDF", "application/pdf"),
        uploaded_by=7,
        category="identity",
        expiry_date="2030-01-01",
    )

    document = repo.get_document(document_id)
    assert document.file_path == f"3/{epoch_millis(NOW)}_my_passport.pdf"
    assert document.name == "my passport.pdf"
    assert document.category is DocumentCategory.IDENTITY
    assert document.expiry_date == date(2030, 1, 1)
    assert document.file_size == 4
    assert storage.download(PLAYER_DOCUMENTS_BUCKET, document.file_path) == b"%PDF"


def test_upload_validates_input(storage, clock):
    service = DocumentService(FakeDocumentRepo(), storage, clock=clock)

    with pytest.raises(ValidationError, match="Missing file or player ID"):
        service.upload(player_id=3, file=None, uploaded_by=7)
    with pytest.raises(ValidationError, match="less than 10MB"):
        service.upload(player_id=3, file=UploadedFile("big.bin", b"x" * (10 * 1024 * 1024 + 1)), uploaded_by=7)


def test_failed_insert_removes_uploaded_file(storage, clock):
    service = DocumentService(FakeDocumentRepo(fail_insert=True), storage, clock=clock)

    with pytest.raises(RuntimeError):
        service.upload(player_id=3, file=UploadedFile("a.pdf", b"data"), uploaded_by=7)

    assert not storage.exists(PLAYER_DOCUMENTS_BUCKET, f"3/{epoch_millis(NOW)}_a.pdf")


def test_signed_url_and_delete(storage, clock):
    repo = FakeDocumentRepo()
    service = DocumentService(repo, storage, clock=clock)
    document_id = service.upload(player_id=3, file=UploadedFile("a.pdf", b"data"), uploaded_by=7)
    path = repo.get_document(document_id).file_path

    url = service.signed_url(document_id)
    assert url.startswith("/storage/signed/")
    assert storage.resolve_signed_token(url.rsplit("/", 1)[1]) == (PLAYER_DOCUMENTS_BUCKET, path)

    service.delete(document_id)
    assert repo.get_document(document_id) is None
    assert not storage.exists(PLAYER_DOCUMENTS_BUCKET, path)
    with pytest.raises(NotFoundError):
        service.signed_url(document_id)


def test_upload_endpoint_and_signed_download(make_client, storage, clock):
    service = DocumentService(FakeDocumentRepo(), storage, clock=clock)
    client = make_client(document_service=service, storage=storage)

    res = client.post(
        "/api/players/3/documents",
        data={"file": (BytesIO(b"hello"), "notes.txt"), "category": "medical"},
        content_type="multipart/form-data",
    )
    assert res.status_code == 201
    document_id = res.get_json()["document_id"]

    listing = client.get("/api/players/3/documents").get_json()["documents"]
    assert listing[0]["category"] == "medical"
    assert listing[0]["size_label"] == "5 Bytes"

    url = client.get(f"/api/documents/{document_id}/url").get_json()["url"]
    download = client.get(url)
    assert download.status_code == 200
    assert download.data == b"hello"


def test_upload_endpoint_without_file(make_client, storage, clock):
    client = make_client(document_service=DocumentService(FakeDocumentRepo(), storage, clock=clock))
    res = client.post("/api/players/3/documents", data={}, content_type="multipart/form-data")
    assert res.status_code == 400
    assert res.get_json()["message"] == "Missing file or player ID"
