"""Supabase client and database operations."""

from supabase import create_client, Client
from functools import lru_cache
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID

from fitlog.config import get_settings
from fitlog.db.base import LogStore, NotificationLedger
from fitlog.models.notification import NotificationRecord
from fitlog.models.tracking import ActivityAnalysis, ActivityLog, ActivityLogCreate, StoredFile
from fitlog.models.user import NotificationSettings, User, UserStreakState


@lru_cache()
def get_supabase_client() -> Client:
    """Get cached Supabase client."""
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_key)


def _state_from_row(row: dict) -> UserStreakState:
    return UserStreakState(
        current_streak=row.get("current_streak") or 0,
        longest_streak=row.get("longest_streak") or 0,
        total_uploads=row.get("total_uploads") or 0,
        last_upload_date=row.get("last_upload_date"),
        last_streak_reset=row.get("last_streak_reset") or row["created_at"],
        version=row.get("stats_version") or 0,
    )


def _user_from_row(row: dict) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        first_name=row.get("first_name") or "",
        last_name=row.get("last_name") or "",
        notification_settings=NotificationSettings(
            motivational_reminders=row.get("motivational_reminders", True),
            consistency_alerts=row.get("consistency_alerts", True),
        ),
        stats=_state_from_row(row),
        created_at=row.get("created_at"),
    )


def _log_from_row(row: dict) -> ActivityLog:
    return ActivityLog(
        id=row["id"],
        user_id=row["user_id"],
        category=row["category"],
        timestamp=row["timestamp"],
        title=row.get("title") or "",
        description=row.get("description") or "",
        analysis=ActivityAnalysis(
            detected_label=row["detected_label"],
            confidence=row.get("confidence") or 0,
            suggestions=row.get("suggestions") or [],
        ),
        file=StoredFile(file_ref=row["file_ref"], view_url=row["view_url"]),
    )


class DatabaseService(LogStore, NotificationLedger):
    """Database operations for FitLog."""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase_client()

    # Activity log operations
    def append_log(self, log_data: ActivityLogCreate) -> ActivityLog:
        """Persist a new activity log."""
        data = {
            "user_id": str(log_data.user_id),
            "category": log_data.category,
            "timestamp": log_data.timestamp.isoformat(),
            "title": log_data.title,
            "description": log_data.description,
            "detected_label": log_data.analysis.detected_label,
            "confidence": log_data.analysis.confidence,
            "suggestions": log_data.analysis.suggestions,
            "file_ref": log_data.file.file_ref,
            "view_url": log_data.file.view_url,
        }
        result = self.client.table("activity_logs").insert(data).execute()
        return _log_from_row(result.data[0])

    def find_logs_by_user(self, user_id: UUID, start: datetime, end: datetime) -> List[ActivityLog]:
        result = (
            self.client.table("activity_logs")
            .select("*")
            .eq("user_id", str(user_id))
            .gte("timestamp", start.isoformat())
            .lte("timestamp", end.isoformat())
            .order("timestamp")
            .execute()
        )
        return [_log_from_row(row) for row in result.data]

    def get_recent_logs(self, user_id: UUID, limit: int = 10, category: Optional[str] = None) -> List[ActivityLog]:
        query = (
            self.client.table("activity_logs")
            .select("*")
            .eq("user_id", str(user_id))
        )
        if category:
            query = query.eq("category", category)
        result = query.order("timestamp", desc=True).limit(limit).execute()
        return [_log_from_row(row) for row in result.data]

    def get_log(self, user_id: UUID, log_id: UUID) -> Optional[ActivityLog]:
        result = (
            self.client.table("activity_logs")
            .select("*")
            .eq("id", str(log_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if result.data:
            return _log_from_row(result.data[0])
        return None

    def delete_log(self, log_id: UUID) -> None:
        self.client.table("activity_logs").delete().eq("id", str(log_id)).execute()

    # User operations
    def get_user(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        result = (
            self.client.table("users")
            .select("*")
            .eq("id", str(user_id))
            .execute()
        )
        if result.data:
            return _user_from_row(result.data[0])
        return None

    def get_streak_state(self, user_id: UUID) -> Optional[UserStreakState]:
        user = self.get_user(user_id)
        return user.stats if user else None

    def set_streak_state(self, user_id: UUID, state: UserStreakState) -> bool:
        """Single conditional row update keyed on ``stats_version``."""
        result = (
            self.client.table("users")
            .update({
                "current_streak": state.current_streak,
                "longest_streak": state.longest_streak,
                "total_uploads": state.total_uploads,
                "last_upload_date": state.last_upload_date.isoformat() if state.last_upload_date else None,
                "last_streak_reset": state.last_streak_reset.isoformat(),
                "stats_version": state.version + 1,
            })
            .eq("id", str(user_id))
            .eq("stats_version", state.version)
            .execute()
        )
        return bool(result.data)

    def get_users_missing_log(self, day: date) -> List[User]:
        result = (
            self.client.table("users")
            .select("*")
            .eq("motivational_reminders", True)
            .or_(f"last_upload_date.is.null,last_upload_date.lt.{day.isoformat()}")
            .execute()
        )
        return [_user_from_row(row) for row in result.data]

    def get_users_due_for_cycle_reset(self, cutoff: datetime) -> List[User]:
        # Users never reset count from their sign-up time
        stamp = cutoff.isoformat()
        result = (
            self.client.table("users")
            .select("*")
            .or_(
                f"last_streak_reset.lte.{stamp},"
                f"and(last_streak_reset.is.null,created_at.lte.{stamp})"
            )
            .execute()
        )
        return [_user_from_row(row) for row in result.data]

    def update_notification_settings(self, user_id: UUID, settings: NotificationSettings) -> NotificationSettings:
        result = (
            self.client.table("users")
            .update(settings.model_dump())
            .eq("id", str(user_id))
            .execute()
        )
        return _user_from_row(result.data[0]).notification_settings

    # Notification ledger
    def has_sent(self, user_id: UUID, notification_type: str, day: date) -> bool:
        result = (
            self.client.table("notifications")
            .select("id")
            .eq("user_id", str(user_id))
            .eq("type", notification_type)
            .eq("day", day.isoformat())
            .limit(1)
            .execute()
        )
        return bool(result.data)

    def record_sent(self, record: NotificationRecord) -> None:
        data = record.model_dump(mode="json")
        self.client.table("notifications").upsert(data, on_conflict="user_id,type,day").execute()
