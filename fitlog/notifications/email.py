"""E-mail delivery and message templates."""

import logging
import random
from email.message import EmailMessage
from html import escape

import aiosmtplib

from fitlog.config import Settings
from fitlog.models.notification import MessagePayload
from fitlog.models.tracking import WeeklyStats

logger = logging.getLogger(__name__)


MOTIVATIONAL_MESSAGES = [
    "Your fitness journey is important, and every day counts!",
    "Consistency is the key to achieving your fitness goals.",
    "Don't let one missed day break your amazing progress!",
    "Your future self will thank you for staying committed today.",
    "Small daily actions lead to big results over time.",
]


class DeliveryError(RuntimeError):
    """Raised when a message could not be handed to the mail server."""


class EmailSender:
    """Send HTML e-mail over SMTP."""

    def __init__(self, settings: Settings):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.user = settings.smtp_user
        self.password = settings.smtp_password
        self.sender_name = settings.mail_sender_name
        self.from_address = settings.mail_from or settings.smtp_user

    async def send(self, to_address: str, subject: str, html_body: str) -> None:
        """Deliver one message."""
        if not self.from_address:
            raise DeliveryError("No sender address configured (set MAIL_FROM or SMTP_USER)")

        message = EmailMessage()
        message["From"] = f'"{self.sender_name}" <{self.from_address}>'
        message["To"] = to_address
        message["Subject"] = subject
        message.set_content(html_body, subtype="html")

        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.user or None,
                password=self.password or None,
                start_tls=True,
                timeout=30,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"Failed to send email to {to_address}: {e}") from e

        logger.info("Email sent to %s: %s", to_address, subject)


def build_motivational_message(
    first_name: str, current_streak: int, longest_streak: int, app_url: str
) -> MessagePayload:
    """Reminder for a user who has not logged anything today."""
    name = escape(first_name or "there")
    tip = random.choice(MOTIVATIONAL_MESSAGES)

    if current_streak > 0:
        streak_block = f"""<div class="streak-info">
    <div class="streak-number">{current_streak}</div>
    <p>Day Streak - Don't break it now!</p>
</div>"""
    else:
        streak_block = """<div class="streak-info">
    <div class="streak-number">0</div>
    <p>Start your streak today!</p>
</div>"""

    html = f"""<!DOCTYPE html>
<html>
<body>
<h2>Hi {name}!</h2>
<p>{tip}</p>
{streak_block}
<p>Your best streak so far: <b>{longest_streak}</b> days.</p>
<p>We noticed you haven't logged your workout or meal today. It's not too late to keep your momentum going!</p>
<p><a href="{app_url}/upload">Log Your Activity Now</a></p>
<p>You're receiving this because you have motivational reminders enabled.
<a href="{app_url}/settings">Update notification preferences</a></p>
</body>
</html>"""

    return MessagePayload(
        subject=f"Don't break your {current_streak}-day streak, {first_name or 'there'}!",
        html=html,
    )


def build_weekly_progress_message(first_name: str, weekly: WeeklyStats) -> MessagePayload:
    """Summary sent when a user's 30-day cycle closes."""
    name = escape(first_name or "there")

    html = f"""<!DOCTYPE html>
<html>
<body>
<h1>Weekly Progress Report</h1>
<h2>Great week, {name}!</h2>
<p>Here's how you performed this week:</p>
<ul>
<li><b>{weekly.workouts}</b> workouts logged</li>
<li><b>{weekly.meals}</b> meals tracked</li>
</ul>
<p>Keep up the excellent work! Consistency is key to reaching your fitness goals.</p>
</body>
</html>"""

    return MessagePayload(
        subject=f"Your weekly progress summary, {first_name or 'there'}!",
        html=html,
    )
