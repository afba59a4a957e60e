"""Shared fixtures: in-memory collaborators for the FitLog services."""

from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

import pytest

from fitlog.config import Settings
from fitlog.db.base import FileStore, LogStore, NotificationLedger
from fitlog.db.storage import FileStoreError
from fitlog.models.notification import NotificationRecord
from fitlog.models.tracking import ActivityAnalysis, ActivityLog, ActivityLogCreate, StoredFile
from fitlog.models.user import NotificationSettings, User, UserStreakState
from fitlog.notifications.email import DeliveryError
from fitlog.services.insights import InsightGenerator
from fitlog.services.notifier import CycleNotifier
from fitlog.services.streak import StreakEngine


EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class InMemoryStore(LogStore, NotificationLedger):
    """Dict-backed store with the same conditional-write semantics as Supabase."""

    def __init__(self):
        self.users = {}
        self.logs = {}
        self.notifications: List[NotificationRecord] = []

    def add_user(self, first_name="Alex", email=None, motivational=True, alerts=True, **stats) -> User:
        stats.setdefault("last_streak_reset", EPOCH)
        user_id = uuid4()
        user = User(
            id=user_id,
            email=email or f"{first_name.lower()}@example.com",
            first_name=first_name,
            notification_settings=NotificationSettings(
                motivational_reminders=motivational,
                consistency_alerts=alerts,
            ),
            stats=UserStreakState(**stats),
        )
        self.users[user_id] = user
        return user

    def add_log(self, user_id: UUID, timestamp: datetime, category="workout", label="Cardio") -> ActivityLog:
        return self.append_log(ActivityLogCreate(
            user_id=user_id,
            category=category,
            timestamp=timestamp,
            title=label,
            analysis=ActivityAnalysis(detected_label=label, confidence=0.9),
            file=StoredFile(file_ref=f"{uuid4()}.jpg", view_url="https://files.example.com/x.jpg"),
        ))

    def append_log(self, log_data: ActivityLogCreate) -> ActivityLog:
        log = ActivityLog(id=uuid4(), **log_data.model_dump())
        self.logs[log.id] = log
        return log

    def find_logs_by_user(self, user_id, start, end):
        logs = [
            log for log in self.logs.values()
            if log.user_id == user_id and start <= log.timestamp <= end
        ]
        return sorted(logs, key=lambda log: log.timestamp)

    def get_recent_logs(self, user_id, limit=10, category=None):
        logs = [
            log for log in self.logs.values()
            if log.user_id == user_id and (category is None or log.category == category)
        ]
        return sorted(logs, key=lambda log: log.timestamp, reverse=True)[:limit]

    def get_log(self, user_id, log_id):
        log = self.logs.get(log_id)
        if log and log.user_id == user_id:
            return log
        return None

    def delete_log(self, log_id):
        self.logs.pop(log_id, None)

    def get_user(self, user_id) -> Optional[User]:
        return self.users.get(user_id)

    def get_streak_state(self, user_id):
        user = self.users.get(user_id)
        return user.stats if user else None

    def set_streak_state(self, user_id, state):
        user = self.users.get(user_id)
        if user is None or user.stats.version != state.version:
            return False
        stored = state.model_copy(update={"version": state.version + 1})
        self.users[user_id] = user.model_copy(update={"stats": stored})
        return True

    def get_users_missing_log(self, day: date):
        return [
            user for user in self.users.values()
            if user.notification_settings.motivational_reminders
            and (user.stats.last_upload_date is None or user.stats.last_upload_date < day)
        ]

    def get_users_due_for_cycle_reset(self, cutoff):
        return [user for user in self.users.values() if user.stats.last_streak_reset <= cutoff]

    def update_notification_settings(self, user_id, settings):
        self.users[user_id] = self.users[user_id].model_copy(update={"notification_settings": settings})
        return settings

    def has_sent(self, user_id, notification_type, day):
        return any(
            r.user_id == user_id and r.type == notification_type and r.day == day
            for r in self.notifications
        )

    def record_sent(self, record):
        self.notifications.append(record)


class FakeFileStore(FileStore):
    def __init__(self, fail=False):
        self.fail = fail
        self.files = {}
        self.deleted = []

    def store(self, data, *, path, content_type):
        if self.fail:
            raise FileStoreError("storage unavailable")
        self.files[path] = data
        return StoredFile(file_ref=path, view_url=f"https://files.example.com/{path}")

    def delete(self, file_ref):
        self.deleted.append(file_ref)
        self.files.pop(file_ref, None)


class FakeSender:
    """Records messages instead of sending them."""

    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.sent = []

    async def send(self, to_address, subject, html_body):
        if to_address in self.fail_for:
            raise DeliveryError(f"Failed to send email to {to_address}")
        self.sent.append((to_address, subject, html_body))


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        supabase_url="http://localhost:54321",
        supabase_key="test-key",
        timezone="UTC",
        upload_retry_delay=0,
        enable_scheduler=False,
    )


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def engine(store, settings):
    return StreakEngine(store, settings)


@pytest.fixture
def insights(store, engine):
    return InsightGenerator(store, engine)


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def notifier(store, engine, insights, sender, settings):
    return CycleNotifier(store, store, engine, insights, sender, settings)
