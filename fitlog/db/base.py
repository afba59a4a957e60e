"""Storage interfaces the core is written against."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from fitlog.models.notification import NotificationRecord, NotificationType
from fitlog.models.tracking import ActivityLog, ActivityLogCreate, Category, StoredFile
from fitlog.models.user import NotificationSettings, User, UserStreakState


class LogStore(ABC):
    """Activity logs plus the per-user records derived from them."""

    @abstractmethod
    def append_log(self, log_data: ActivityLogCreate) -> ActivityLog:
        """Persist a new activity log."""

    @abstractmethod
    def find_logs_by_user(self, user_id: UUID, start: datetime, end: datetime) -> List[ActivityLog]:
        """Logs with ``start <= timestamp <= end``, oldest first."""

    @abstractmethod
    def get_recent_logs(
        self, user_id: UUID, limit: int = 10, category: Optional[Category] = None
    ) -> List[ActivityLog]:
        """Most recent logs first."""

    @abstractmethod
    def get_log(self, user_id: UUID, log_id: UUID) -> Optional[ActivityLog]:
        """Get a log owned by ``user_id``."""

    @abstractmethod
    def delete_log(self, log_id: UUID) -> None:
        """Delete a log record."""

    @abstractmethod
    def get_user(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""

    @abstractmethod
    def get_streak_state(self, user_id: UUID) -> Optional[UserStreakState]:
        """Get the stored streak state."""

    @abstractmethod
    def set_streak_state(self, user_id: UUID, state: UserStreakState) -> bool:
        """Write ``state`` if the stored version still equals ``state.version``.

        Returns False when another writer got there first.
        """

    @abstractmethod
    def get_users_missing_log(self, day: date) -> List[User]:
        """Users with reminders on whose last upload is before ``day`` or absent."""

    @abstractmethod
    def get_users_due_for_cycle_reset(self, cutoff: datetime) -> List[User]:
        """Users whose current cycle started at or before ``cutoff``."""

    @abstractmethod
    def update_notification_settings(
        self, user_id: UUID, settings: NotificationSettings
    ) -> NotificationSettings:
        """Replace a user's notification settings."""


class NotificationLedger(ABC):
    """Record of notifications already sent."""

    @abstractmethod
    def has_sent(self, user_id: UUID, notification_type: NotificationType, day: date) -> bool:
        """Whether a notification of this type went out on ``day``."""

    @abstractmethod
    def record_sent(self, record: NotificationRecord) -> None:
        """Store a sent marker."""


class FileStore(ABC):
    """Binary storage for uploaded images."""

    @abstractmethod
    def store(self, data: bytes, *, path: str, content_type: str) -> StoredFile:
        """Upload bytes and return a reference and viewable URL."""

    @abstractmethod
    def delete(self, file_ref: str) -> None:
        """Remove a stored file."""
