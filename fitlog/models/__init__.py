"""Data models for FitLog."""

from .user import User, UserStreakState, NotificationSettings
from .tracking import (
    ActivityAnalysis,
    ActivityLog,
    ActivityLogCreate,
    AnalyticsReport,
    InsightsReport,
    StoredFile,
    WeeklyStats,
)
from .notification import MessagePayload, NotificationRecord

__all__ = [
    "User",
    "UserStreakState",
    "NotificationSettings",
    "ActivityAnalysis",
    "ActivityLog",
    "ActivityLogCreate",
    "AnalyticsReport",
    "InsightsReport",
    "StoredFile",
    "WeeklyStats",
    "MessagePayload",
    "NotificationRecord",
]
