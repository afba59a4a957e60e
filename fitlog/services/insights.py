"""Rule-based insights from streak and weekly activity."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from fitlog.db.base import LogStore
from fitlog.models.tracking import WeeklyStats
from fitlog.services.streak import StreakEngine

MAX_INSIGHTS = 3

CONSISTENCY_TIERS = [
    (80, "🔥 Excellent consistency! You're logging activities 4+ times per week."),
    (60, "👍 Good consistency! Try to log activities more regularly for better results."),
    (40, "📈 Your consistency is improving! Aim for at least 3 logs per week."),
    (0, "💪 Let's work on consistency! Regular logging helps build lasting habits."),
]

STREAK_TIERS = [
    (14, "🏆 Amazing streak! You're building incredible momentum."),
    (7, "🎯 Great weekly streak! Keep the momentum going."),
    (3, "🌟 Nice streak building! Consistency is key to success."),
]

MORE_MEALS = "🍎 Consider logging more meals to balance your fitness tracking."
MORE_WORKOUTS = "🏋️ Great nutrition tracking! Don't forget to log your workouts too."
BALANCED = "⚖️ Perfect balance between workout and nutrition tracking!"
NO_ACTIVITY = "🚀 Ready to start? Your first log is just a photo away!"
HIGH_ACTIVITY = "🌟 Outstanding weekly activity! You're crushing your goals."


def build_insights(consistency_score: int, current_streak: int, weekly: WeeklyStats) -> List[str]:
    """Evaluate the rule groups in order and keep the first three messages."""
    insights = []

    for threshold, message in CONSISTENCY_TIERS:
        if consistency_score >= threshold:
            insights.append(message)
            break

    for threshold, message in STREAK_TIERS:
        if current_streak >= threshold:
            insights.append(message)
            break

    if weekly.workouts > weekly.meals * 2:
        insights.append(MORE_MEALS)
    elif weekly.meals > weekly.workouts * 2:
        insights.append(MORE_WORKOUTS)
    elif weekly.workouts > 0 and weekly.meals > 0:
        insights.append(BALANCED)

    if weekly.total == 0:
        insights.append(NO_ACTIVITY)
    elif weekly.total >= 7:
        insights.append(HIGH_ACTIVITY)

    return insights[:MAX_INSIGHTS]


class InsightGenerator:
    """Generate insight messages for a user."""

    def __init__(self, store: LogStore, engine: StreakEngine):
        self.store = store
        self.engine = engine

    def weekly_stats(self, user_id: UUID, now: Optional[datetime] = None) -> WeeklyStats:
        """Workout and meal counts over the last seven days."""
        now = now or datetime.now(timezone.utc)
        logs = self.store.find_logs_by_user(user_id, now - timedelta(days=7), now)
        workouts = sum(1 for log in logs if log.category == "workout")
        meals = sum(1 for log in logs if log.category == "meal")
        return WeeklyStats(workouts=workouts, meals=meals, total=len(logs))

    def generate(self, user_id: UUID, now: Optional[datetime] = None) -> List[str]:
        """Insights for ``user_id``; empty when the user does not exist."""
        now = now or datetime.now(timezone.utc)
        state = self.store.get_streak_state(user_id)
        if state is None:
            return []

        score = self.engine.consistency_score(user_id, now)
        weekly = self.weekly_stats(user_id, now)
        return build_insights(score, state.current_streak, weekly)
