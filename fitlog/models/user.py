"""User and streak state models."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from uuid import UUID


class NotificationSettings(BaseModel):
    """Per-user e-mail preferences."""

    motivational_reminders: bool = True
    consistency_alerts: bool = True


class UserStreakState(BaseModel):
    """Streak counters for one user.

    Instances are immutable; transitions return a new value which the store
    writes conditionally on ``version``.
    """

    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    total_uploads: int = Field(0, ge=0)
    last_upload_date: Optional[date] = None
    last_streak_reset: datetime
    version: int = 0

    class Config:
        frozen = True
        from_attributes = True


class User(BaseModel):
    """Full user model."""

    id: UUID
    email: str
    first_name: str = ""
    last_name: str = ""
    notification_settings: NotificationSettings = NotificationSettings()
    stats: UserStreakState
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
