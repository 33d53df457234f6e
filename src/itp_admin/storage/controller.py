from __future__ import annotations

import mimetypes
from io import BytesIO
from pathlib import PurePosixPath

from flask import Flask, jsonify, send_file

from ..container import Container
from ..core.exceptions import StorageError


def register(app: Flask, container: Container) -> None:
    @app.route("/storage/signed/<token>", endpoint="storage_signed_download")
    def signed_download(token: str):
        # the token itself is the credential; no session needed
        try:
            bucket, path = container.storage.resolve_signed_token(token)
            data = container.storage.download(bucket, path)
        except StorageError as e:
            return jsonify({"success": False, "message": str(e)}), 403

        name = PurePosixPath(path).name
        mimetype = mimetypes.guess_type(name)[0] or "application/octet-stream"
        return send_file(BytesIO(data), mimetype=mimetype, download_name=name)
