"""APScheduler jobs for reminders and cycle resets."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from fitlog.config import Settings, parse_clock
from fitlog.services.notifier import CycleNotifier

logger = logging.getLogger(__name__)


class NotificationScheduler:
    """Scheduled notification jobs for FitLog."""

    def __init__(self, notifier: CycleNotifier, settings: Settings):
        self.settings = settings
        self.notifier = notifier
        self.scheduler = AsyncIOScheduler(timezone=settings.timezone)

    def start(self) -> None:
        """Start the scheduler with the daily jobs."""
        cutoff = parse_clock(self.settings.missed_log_cutoff_time)
        reset_at = parse_clock(self.settings.cycle_reset_time)

        # Missed-log reminders once the cutoff has passed
        self.scheduler.add_job(
            self.notifier.run_daily_check,
            CronTrigger(hour=cutoff.hour, minute=cutoff.minute),
            id="missed_log_check",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )

        # 30-day cycle resets
        self.scheduler.add_job(
            self.notifier.run_cycle_reset,
            CronTrigger(hour=reset_at.hour, minute=reset_at.minute),
            id="cycle_reset",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )

        self.scheduler.start()
        logger.info("Notification scheduler started")

    def stop(self) -> None:
        """Stop the scheduler."""
        self.scheduler.shutdown()
        logger.info("Notification scheduler stopped")
