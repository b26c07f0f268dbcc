"""Object storage: one bucket of generated files on the local filesystem.

Objects live at {base_dir}/{bucket}/{key} and are served publicly from
{public_base_url}/{bucket}/{key}.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path, PurePosixPath

from donlustre.config import get_settings

logger = logging.getLogger(__name__)

BUCKET_NOT_FOUND = "Bucket not found"


class StorageError(RuntimeError):
    """An upload or download against the object store failed."""


class BucketNotFoundError(StorageError):
    def __init__(self, bucket: str):
        self.bucket = bucket
        super().__init__(f"{BUCKET_NOT_FOUND}: {bucket}")


def describe_storage_error(exc: Exception, bucket: str) -> str:
    """Turn a storage failure into a message an admin can act on."""
    message = str(exc)
    if BUCKET_NOT_FOUND.lower() in message.lower():
        return (
            f"Storage bucket '{bucket}' does not exist. Create it or set "
            f"STORAGE_BUCKET to an existing bucket, then retry the upload."
        )
    return f"Receipt upload failed: {message}"


class ObjectStore:
    def __init__(self, base_dir: str | Path, bucket: str, public_base_url: str = "/storage"):
        self.base_dir = Path(base_dir)
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    @property
    def bucket_dir(self) -> Path:
        return self.base_dir / self.bucket

    def ensure_bucket(self) -> Path:
        if not self.bucket_dir.is_dir():
            self.bucket_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Created storage bucket %s at %s", self.bucket, self.bucket_dir)
        return self.bucket_dir

    def _object_path(self, key: str) -> Path:
        parts = PurePosixPath(key).parts
        if not parts or any(p in ("..", "/") for p in parts):
            raise StorageError(f"Invalid object key: {key}")
        return self.bucket_dir.joinpath(*parts)

    def _upload_sync(self, key: str, data: bytes, upsert: bool) -> str:
        if not self.bucket_dir.is_dir():
            raise BucketNotFoundError(self.bucket)
        path = self._object_path(key)
        if path.exists() and not upsert:
            raise StorageError(f"Object already exists: {key}")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return key

    async def upload(self, key: str, data: bytes, upsert: bool = True) -> str:
        """Write ``data`` at ``key``. Returns the key."""
        return await asyncio.to_thread(self._upload_sync, key, data, upsert)

    def _download_sync(self, key: str) -> bytes:
        if not self.bucket_dir.is_dir():
            raise BucketNotFoundError(self.bucket)
        path = self._object_path(key)
        if not path.is_file():
            raise FileNotFoundError(f"Object not found: {key}")
        return path.read_bytes()

    async def download(self, key: str) -> bytes:
        return await asyncio.to_thread(self._download_sync, key)

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{key}"


def get_object_store() -> ObjectStore:
    settings = get_settings().storage
    return ObjectStore(settings.base_dir, settings.bucket, settings.public_base_url)


def receipt_key(order_id: str) -> str:
    return f"orders/{order_id}.pdf"
