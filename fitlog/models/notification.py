"""Notification models."""

from pydantic import BaseModel
from typing import Literal
from datetime import date, datetime
from uuid import UUID


NotificationType = Literal["missed_log", "cycle_summary"]


class MessagePayload(BaseModel):
    """Rendered e-mail ready for delivery."""

    subject: str
    html: str


class NotificationRecord(BaseModel):
    """Ledger entry for a sent notification."""

    user_id: UUID
    type: NotificationType
    day: date
    sent_at: datetime
    subject: str
    current_streak: int = 0
