"""Filesystem-backed buckets.

Layout::

    STORAGE_ROOT/
        player-documents/
            <account or player id>/<file>
        prospect-onboarding/
            <prospect id>/<file>

Downloads go through signed, time-limited tokens (itsdangerous) so a link
handed to the browser stops working after ``max_age`` seconds.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.constants import SIGNED_URL_MAX_AGE
from ..core.exceptions import StorageError
from .bucket import BucketStorage

logger = logging.getLogger(__name__)

SIGNED_URL_PREFIX = "/storage/signed/"


class LocalBucketStorage(BucketStorage):
    def __init__(self, root: str | Path, *, secret_key: str, max_age: int = SIGNED_URL_MAX_AGE):
        self._root = Path(root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)
        self._serializer = URLSafeTimedSerializer(secret_key, salt="itp-storage")
        self._max_age = int(max_age)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, bucket: str, path: str) -> Path:
        if not bucket or not path:
            raise StorageError("Bucket and path are required")
        bucket_dir = (self._root / bucket).resolve()
        target = (bucket_dir / path).resolve()
        # no escaping the bucket through '..' segments
        if bucket_dir != target and bucket_dir not in target.parents:
            raise StorageError(f"Invalid object path: {path}")
        return target

    def upload(self, bucket: str, path: str, data: bytes, *, content_type: Optional[str] = None) -> str:
        target = self._resolve(bucket, path)
        if target.exists():
            raise StorageError(f"Object already exists: {bucket}/{path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Upload failed: {e}") from e
        logger.debug("Stored %s/%s (%d bytes, %s)", bucket, path, len(data), content_type or "unknown type")
        return path

    def download(self, bucket: str, path: str) -> bytes:
        target = self._resolve(bucket, path)
        if not target.is_file():
            raise StorageError(f"Object not found: {bucket}/{path}")
        try:
            return target.read_bytes()
        except OSError as e:
            raise StorageError(f"Download failed: {e}") from e

    def remove(self, bucket: str, paths: Sequence[str]) -> None:
        for path in paths:
            target = self._resolve(bucket, path)
            try:
                target.unlink(missing_ok=True)
            except OSError as e:
                raise StorageError(f"Remove failed: {e}") from e
        logger.debug("Removed %d object(s) from %s", len(paths), bucket)

    def exists(self, bucket: str, path: str) -> bool:
        return self._resolve(bucket, path).is_file()

    def create_signed_url(self, bucket: str, path: str) -> str:
        if not self.exists(bucket, path):
            raise StorageError(f"Object not found: {bucket}/{path}")
        token = self._serializer.dumps({"bucket": bucket, "path": path})
        return f"{SIGNED_URL_PREFIX}{token}"

    def resolve_signed_token(self, token: str) -> Tuple[str, str]:
        try:
            data = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired:
            raise StorageError("Link has expired")
        except BadSignature:
            raise StorageError("Invalid link")
        return str(data["bucket"]), str(data["path"])
