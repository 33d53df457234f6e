from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple


class BucketStorage(Protocol):
    """File buckets addressed by (bucket, object path)."""

    def upload(self, bucket: str, path: str, data: bytes, *, content_type: Optional[str] = None) -> str:
        raise NotImplementedError

    def download(self, bucket: str, path: str) -> bytes:
        raise NotImplementedError

    def remove(self, bucket: str, paths: Sequence[str]) -> None:
        raise NotImplementedError

    def exists(self, bucket: str, path: str) -> bool:
        raise NotImplementedError

    def create_signed_url(self, bucket: str, path: str) -> str:
        raise NotImplementedError

    def resolve_signed_token(self, token: str) -> Tuple[str, str]:
        raise NotImplementedError
