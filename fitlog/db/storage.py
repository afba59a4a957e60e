"""Supabase Storage backend for uploaded images."""

import logging
import time
from typing import Optional

from supabase import Client

from fitlog.config import Settings
from fitlog.db.base import FileStore
from fitlog.db.supabase import get_supabase_client
from fitlog.models.tracking import StoredFile

logger = logging.getLogger(__name__)


class FileStoreError(RuntimeError):
    """Raised when the file store rejects an operation."""


class SupabaseFileStore(FileStore):
    """Images kept in a public Supabase Storage bucket."""

    def __init__(self, settings: Settings, client: Optional[Client] = None):
        client = client or get_supabase_client()
        self.bucket = client.storage.from_(settings.storage_bucket)
        self.retries = settings.upload_retries
        self.retry_delay = settings.upload_retry_delay

    def store(self, data: bytes, *, path: str, content_type: str) -> StoredFile:
        """Upload with a fixed delay between attempts."""
        for attempt in range(1, self.retries + 1):
            try:
                self.bucket.upload(path, data, file_options={"content-type": content_type})
                break
            except Exception as e:
                if attempt == self.retries:
                    raise FileStoreError(f"Failed to upload {path}: {e}") from e
                logger.warning("Upload of %s failed (attempt %d/%d): %s", path, attempt, self.retries, e)
                time.sleep(self.retry_delay)

        return StoredFile(file_ref=path, view_url=self.bucket.get_public_url(path))

    def delete(self, file_ref: str) -> None:
        try:
            self.bucket.remove([file_ref])
        except Exception as e:
            raise FileStoreError(f"Failed to delete {file_ref}: {e}") from e
