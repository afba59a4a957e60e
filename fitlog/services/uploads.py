"""Photo uploads and log deletion."""

import logging
import os
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from fitlog.config import Settings
from fitlog.db.base import FileStore, LogStore
from fitlog.db.storage import FileStoreError
from fitlog.models.tracking import ActivityLog, ActivityLogCreate, Category
from fitlog.models.user import User, UserStreakState
from fitlog.services.activity import analyze_activity
from fitlog.services.streak import StreakEngine

logger = logging.getLogger(__name__)


class UploadValidationError(ValueError):
    """Raised for uploads rejected before reaching storage."""


class UploadResult(BaseModel):
    """Created log and the streak state after it."""

    log: ActivityLog
    stats: Optional[UserStreakState] = None


class UploadService:
    """Store the photo, then append the log, then update the streak."""

    def __init__(self, store: LogStore, file_store: FileStore, engine: StreakEngine, settings: Settings):
        self.store = store
        self.file_store = file_store
        self.engine = engine
        self.settings = settings

    def validate(self, data: bytes, content_type: str, title: str) -> None:
        if not title or not title.strip():
            raise UploadValidationError("Missing required fields")
        if not content_type or not content_type.startswith("image/"):
            raise UploadValidationError("Invalid file type. Please upload an image.")
        if not data:
            raise UploadValidationError("Uploaded file is empty.")
        if len(data) > self.settings.upload_max_bytes:
            limit_mb = self.settings.upload_max_bytes // (1024 * 1024)
            raise UploadValidationError(f"File too large. Maximum size is {limit_mb}MB.")

    def upload(
        self,
        user: User,
        data: bytes,
        filename: str,
        content_type: str,
        category: Category,
        title: str,
        description: str = "",
        now: Optional[datetime] = None,
    ) -> UploadResult:
        """Create a log for an uploaded photo.

        Raises FileStoreError when storage fails after retries; no log is
        written in that case.
        """
        self.validate(data, content_type, title)
        now = now or datetime.now(timezone.utc)

        stamp = now.strftime("%Y-%m-%dT%H-%M-%S-%f")
        path = f"{user.id}/{category}s/{stamp}_{os.path.basename(filename or 'photo.jpg')}"
        stored = self.file_store.store(data, path=path, content_type=content_type)

        try:
            log = self.store.append_log(ActivityLogCreate(
                user_id=user.id,
                category=category,
                timestamp=now,
                title=title.strip(),
                description=description or "",
                analysis=analyze_activity(category, title, description or ""),
                file=stored,
            ))
        except Exception:
            logger.error("Could not record log for %s, removing %s", user.id, stored.file_ref)
            try:
                self.file_store.delete(stored.file_ref)
            except FileStoreError as e:
                logger.warning("Could not delete stored file %s: %s", stored.file_ref, e)
            raise

        logger.info("Stored %s log %s for %s", category, log.id, user.id)

        stats = self.engine.record_log(user.id, log.timestamp)
        return UploadResult(log=log, stats=stats)

    def delete(self, user: User, log_id: UUID) -> bool:
        """Delete one of the user's logs. Returns False if it does not exist."""
        log = self.store.get_log(user.id, log_id)
        if log is None:
            return False

        try:
            self.file_store.delete(log.file.file_ref)
        except FileStoreError as e:
            logger.warning("Could not delete stored file %s: %s", log.file.file_ref, e)

        self.store.delete_log(log.id)
        self.engine.record_deletion(user.id)
        return True
