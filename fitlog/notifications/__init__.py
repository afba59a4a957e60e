"""Outbound notifications."""

from .email import (
    DeliveryError,
    EmailSender,
    build_motivational_message,
    build_weekly_progress_message,
)

__all__ = [
    "DeliveryError",
    "EmailSender",
    "build_motivational_message",
    "build_weekly_progress_message",
]
