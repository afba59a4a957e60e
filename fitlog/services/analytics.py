"""Activity analytics over a date range."""

import math
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from fitlog.db.base import LogStore
from fitlog.models.tracking import (
    ActivityLog,
    AnalyticsReport,
    CategoryBreakdown,
    DailyActivity,
    DailyStreak,
)
from fitlog.services.streak import StreakEngine


TIMEFRAMES = {"7d": 7, "30d": 30, "90d": 90}
DEFAULT_TIMEFRAME_DAYS = 365


def timeframe_days(timeframe: str) -> int:
    """Days covered by a ``7d``/``30d``/``90d`` timeframe; anything else is a year."""
    return TIMEFRAMES.get(timeframe, DEFAULT_TIMEFRAME_DAYS)


class AnalyticsService:
    """Aggregate a user's logs for charts."""

    def __init__(self, store: LogStore, engine: StreakEngine):
        self.store = store
        self.engine = engine

    def get_report(
        self,
        user_id: UUID,
        timeframe: str = "30d",
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> AnalyticsReport:
        """Analytics between ``start`` and ``end``, or for ``timeframe`` ending now."""
        now = now or datetime.now(timezone.utc)
        if start is None or end is None:
            end = now
            start = now - timedelta(days=timeframe_days(timeframe))

        logs = self.store.find_logs_by_user(user_id, start, end)
        first_day = self.engine.local_date(start)
        last_day = self.engine.local_date(end)

        activity = self._activity_by_day(logs, first_day, last_day)
        total_workouts = sum(1 for log in logs if log.category == "workout")
        total_meals = sum(1 for log in logs if log.category == "meal")

        days = max(math.ceil((end - start) / timedelta(days=1)), 1)

        return AnalyticsReport(
            start_date=first_day,
            end_date=last_day,
            total_workouts=total_workouts,
            total_meals=total_meals,
            weekly_average=round((total_workouts + total_meals) / days * 7, 2),
            consistency_score=self.engine.consistency_score(user_id, now),
            activity_data=activity,
            streak_data=self._streaks(activity),
            category_breakdown=self._breakdown(logs),
        )

    def _activity_by_day(self, logs: List[ActivityLog], first_day: date, last_day: date) -> List[DailyActivity]:
        workouts = Counter()
        meals = Counter()
        for log in logs:
            day = self.engine.local_date(log.timestamp)
            if log.category == "workout":
                workouts[day] += 1
            else:
                meals[day] += 1

        data = []
        day = first_day
        while day <= last_day:
            data.append(DailyActivity(
                day=day,
                workouts=workouts[day],
                meals=meals[day],
                total=workouts[day] + meals[day],
            ))
            day += timedelta(days=1)
        return data

    @staticmethod
    def _streaks(activity: List[DailyActivity]) -> List[DailyStreak]:
        """Running count of consecutive active days, restarting after an empty day."""
        data = []
        streak = 0
        for entry in activity:
            streak = streak + 1 if entry.total > 0 else 0
            data.append(DailyStreak(day=entry.day, streak=streak))
        return data

    @staticmethod
    def _breakdown(logs: List[ActivityLog]) -> CategoryBreakdown:
        workouts = Counter()
        meals = Counter()
        for log in logs:
            label = log.analysis.detected_label or "Other"
            if log.category == "workout":
                workouts[label] += 1
            else:
                meals[label] += 1
        return CategoryBreakdown(workouts=dict(workouts), meals=dict(meals))
