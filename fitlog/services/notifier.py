"""Missed-log reminders and 30-day cycle resets."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fitlog.config import Settings
from fitlog.db.base import LogStore, NotificationLedger
from fitlog.models.notification import NotificationRecord
from fitlog.notifications.email import (
    EmailSender,
    build_motivational_message,
    build_weekly_progress_message,
)
from fitlog.services.insights import InsightGenerator
from fitlog.services.streak import StreakEngine

logger = logging.getLogger(__name__)


class CycleNotifier:
    """Batch jobs run by the scheduler.

    Users are processed one at a time; a failure for one user is logged and
    the loop moves on.
    """

    def __init__(
        self,
        store: LogStore,
        ledger: NotificationLedger,
        engine: StreakEngine,
        insights: InsightGenerator,
        sender: EmailSender,
        settings: Settings,
    ):
        self.store = store
        self.ledger = ledger
        self.engine = engine
        self.insights = insights
        self.sender = sender
        self.settings = settings

    async def run_daily_check(self, now: Optional[datetime] = None) -> int:
        """Remind users who have not logged today. Returns the number of e-mails sent."""
        now = (now or datetime.now(timezone.utc)).astimezone(self.settings.tz)
        if now.time() < self.settings.missed_log_cutoff:
            logger.debug("Daily check skipped: before cutoff %s", self.settings.missed_log_cutoff_time)
            return 0

        today = now.date()
        logger.info("[%s] Checking for missed logs...", now.isoformat())

        sent = 0
        for user in self.store.get_users_missing_log(today):
            try:
                if self.ledger.has_sent(user.id, "missed_log", today):
                    continue

                message = build_motivational_message(
                    user.first_name,
                    user.stats.current_streak,
                    user.stats.longest_streak,
                    self.settings.app_url,
                )
                await self.sender.send(user.email, message.subject, message.html)

                self.ledger.record_sent(NotificationRecord(
                    user_id=user.id,
                    type="missed_log",
                    day=today,
                    sent_at=now,
                    subject=message.subject,
                    current_streak=user.stats.current_streak,
                ))
                sent += 1
                logger.info("Sent motivational email to %s", user.email)
            except Exception:
                logger.exception("Failed to send motivational email to %s", user.email)

        return sent

    async def run_cycle_reset(self, now: Optional[datetime] = None) -> int:
        """Close every due cycle. Returns the number of users reset."""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=self.settings.cycle_length_days)
        logger.info("[%s] Checking 30-day cycles...", now.isoformat())

        reset = 0
        for user in self.store.get_users_due_for_cycle_reset(cutoff):
            try:
                state = self.engine.reset_cycle_if_due(user.id, now)
            except Exception:
                logger.exception("Failed to reset cycle for %s", user.id)
                continue
            if state is None:
                continue
            reset += 1

            if not user.notification_settings.consistency_alerts:
                continue
            try:
                weekly = self.insights.weekly_stats(user.id, now)
                message = build_weekly_progress_message(user.first_name, weekly)
                await self.sender.send(user.email, message.subject, message.html)
                self.ledger.record_sent(NotificationRecord(
                    user_id=user.id,
                    type="cycle_summary",
                    day=self.engine.local_date(now),
                    sent_at=now,
                    subject=message.subject,
                    current_streak=state.current_streak,
                ))
            except Exception:
                logger.exception("Failed to send cycle summary email to %s", user.email)

        return reset

    async def run_all(self, now: Optional[datetime] = None) -> None:
        """Missed-log check followed by cycle resets."""
        await self.run_daily_check(now)
        await self.run_cycle_reset(now)
