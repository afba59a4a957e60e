"""Daily streak and 30-day consistency tracking."""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional
from uuid import UUID

from fitlog.config import Settings
from fitlog.db.base import LogStore
from fitlog.models.user import UserStreakState

logger = logging.getLogger(__name__)

MAX_WRITE_ATTEMPTS = 5


class StreakUpdateConflict(RuntimeError):
    """Raised when concurrent writers keep winning the conditional update."""


def apply_log(state: UserStreakState, today: date) -> UserStreakState:
    """Return the state after one more log on calendar day ``today``."""
    last_day = state.last_upload_date
    total = state.total_uploads + 1

    if last_day is not None and today <= last_day:
        # Same-day (or back-dated) upload only counts towards the total
        return state.model_copy(update={"total_uploads": total})

    if last_day is not None and today - last_day == timedelta(days=1):
        current = state.current_streak + 1
        return state.model_copy(update={
            "total_uploads": total,
            "current_streak": current,
            "longest_streak": max(state.longest_streak, current),
            "last_upload_date": today,
        })

    # Gap of more than one day, or first upload ever
    return state.model_copy(update={
        "total_uploads": total,
        "current_streak": 1,
        "longest_streak": max(state.longest_streak, 1),
        "last_upload_date": today,
    })


def apply_deletion(state: UserStreakState) -> UserStreakState:
    """Deleting a log lowers the lifetime count but leaves streaks alone."""
    return state.model_copy(update={"total_uploads": max(state.total_uploads - 1, 0)})


def apply_cycle_reset(
    state: UserStreakState, score: int, now: datetime, threshold: int = 50
) -> UserStreakState:
    """Start a new cycle, zeroing the streak when consistency fell below ``threshold``.

    Users at or above the threshold carry their streak into the next cycle.
    """
    update = {"last_streak_reset": now}
    if score < threshold:
        update["current_streak"] = 0
    return state.model_copy(update=update)


def score_from_days(active_days: Iterable[date], window_days: int = 30) -> int:
    """Percentage of the window with at least one log, clamped to 0-100."""
    count = len(set(active_days))
    score = int(count * 100 / window_days + 0.5)
    return max(0, min(score, 100))


class StreakEngine:
    """Applies streak transitions to stored user state."""

    def __init__(self, store: LogStore, settings: Settings):
        self.store = store
        self.settings = settings
        self.tz = settings.tz

    def local_date(self, moment: datetime) -> date:
        """Calendar date of ``moment`` in the reference timezone."""
        if moment.tzinfo is None:
            return moment.date()
        return moment.astimezone(self.tz).date()

    def record_log(self, user_id: UUID, log_timestamp: datetime) -> Optional[UserStreakState]:
        """Update the user's streak for a new log."""
        today = self.local_date(log_timestamp)
        return self._update(user_id, lambda state: apply_log(state, today))

    def record_deletion(self, user_id: UUID) -> Optional[UserStreakState]:
        """Decrement the lifetime upload count."""
        return self._update(user_id, apply_deletion)

    def consistency_score(self, user_id: UUID, as_of: datetime) -> int:
        """Score for the trailing window ending at ``as_of``."""
        start = as_of - timedelta(days=self.settings.consistency_window_days)
        logs = self.store.find_logs_by_user(user_id, start, as_of)
        return score_from_days(
            (self.local_date(log.timestamp) for log in logs),
            self.settings.consistency_window_days,
        )

    def is_cycle_due(self, state: UserStreakState, now: datetime) -> bool:
        return now - state.last_streak_reset >= timedelta(days=self.settings.cycle_length_days)

    def reset_cycle_if_due(self, user_id: UUID, now: datetime) -> Optional[UserStreakState]:
        """Close the user's cycle when it has run its length.

        Returns the new state, or None when the user is unknown or not due.
        """
        state = self.store.get_streak_state(user_id)
        if state is None or not self.is_cycle_due(state, now):
            return None

        score = self.consistency_score(user_id, now)
        threshold = self.settings.consistency_reset_threshold
        logger.info("Cycle reset for %s: consistency %d%%", user_id, score)

        def transition(current: UserStreakState) -> UserStreakState:
            return apply_cycle_reset(current, score, now, threshold)

        return self._update(user_id, transition, initial=state)

    def _update(
        self,
        user_id: UUID,
        transition: Callable[[UserStreakState], UserStreakState],
        initial: Optional[UserStreakState] = None,
    ) -> Optional[UserStreakState]:
        """Read, transform, conditionally write; re-read on a lost race."""
        state = initial
        for _ in range(MAX_WRITE_ATTEMPTS):
            if state is None:
                state = self.store.get_streak_state(user_id)
                if state is None:
                    return None

            new_state = transition(state)
            if self.store.set_streak_state(user_id, new_state):
                return new_state.model_copy(update={"version": state.version + 1})

            logger.debug("Streak write for %s lost a race, retrying", user_id)
            state = None

        raise StreakUpdateConflict(f"Could not update streak for user {user_id}")
