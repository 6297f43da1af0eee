"""
Object storage for uploaded post files.

Wraps a Supabase Storage bucket. Calls are blocking and are not retried:
a failure surfaces immediately as a StorageError.
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import Optional

from supabase import Client

from .config import get_settings
from .exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class StorageError(ExternalServiceError):
    """Raised when the object store rejects or fails an operation."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(
            message,
            service="storage",
            code="STORAGE_ERROR",
            details={"key": key} if key else None,
        )


@dataclass(frozen=True)
class StoredObject:
    """Location of an object after upload."""

    key: str
    url: str


def sanitize_file_name(file_name: Optional[str]) -> str:
    """Make a client-supplied file name safe to use inside an object key."""
    if not file_name:
        return "unnamed"
    cleaned = re.sub(r"\s+", "_", file_name)
    return re.sub(r"[^a-zA-Z0-9_.-]", "", cleaned)


def build_object_key(file_name: Optional[str], now: Optional[float] = None) -> str:
    """Object key of the form <epoch-seconds>__<sanitized name>."""
    timestamp = int(now if now is not None else time.time())
    return f"{timestamp}__{sanitize_file_name(file_name)}"


class ObjectStorage:
    """Thin client over one Supabase Storage bucket."""

    def __init__(self, db: Client, bucket: Optional[str] = None) -> None:
        self._db = db
        self._bucket = bucket or get_settings().storage_bucket

    def _bucket_api(self):
        return self._db.storage.from_(self._bucket)

    def put(self, content: bytes, content_type: str, file_name: Optional[str]) -> StoredObject:
        """Upload bytes under a freshly generated key and return its key and URL."""
        key = build_object_key(file_name)
        try:
            self._bucket_api().upload(
                path=key,
                file=content,
                file_options={"content-type": content_type},
            )
            url = self._bucket_api().get_public_url(key)
        except Exception as e:
            logger.error("Error uploading %s to storage: %s", key, e)
            raise StorageError(f"Failed to upload file: {e}", key) from e

        logger.info("File uploaded to storage: %s", key)
        return StoredObject(key=key, url=url)

    def get(self, key: str) -> bytes:
        logger.info("Downloading file from storage: %s", key)
        try:
            return self._bucket_api().download(key)
        except Exception as e:
            logger.error("Error downloading %s from storage: %s", key, e)
            raise StorageError(f"Failed to download file: {e}", key) from e

    def delete(self, key: str) -> None:
        try:
            self._bucket_api().remove([key])
        except Exception as e:
            logger.error("Error deleting %s from storage: %s", key, e)
            raise StorageError(f"Failed to delete file: {e}", key) from e
        logger.info("File deleted from storage: %s", key)

    def presign(self, key: str, ttl_minutes: int) -> str:
        """Create a temporary download URL for a stored object."""
        try:
            result = self._bucket_api().create_signed_url(key, ttl_minutes * 60)
        except Exception as e:
            logger.error("Error generating signed URL for %s: %s", key, e)
            raise StorageError(f"Failed to generate presigned URL: {e}", key) from e

        url = result.get("signedURL") or result.get("signedUrl")
        if not url:
            raise StorageError("Storage returned no signed URL", key)
        return url
