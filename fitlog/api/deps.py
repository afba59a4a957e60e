"""FastAPI dependencies wiring services to their collaborators."""

from functools import lru_cache
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException

from fitlog.config import Settings, get_settings
from fitlog.db.base import FileStore
from fitlog.db.supabase import DatabaseService
from fitlog.db.storage import SupabaseFileStore
from fitlog.models.user import User
from fitlog.notifications.email import EmailSender
from fitlog.services.analytics import AnalyticsService
from fitlog.services.insights import InsightGenerator
from fitlog.services.notifier import CycleNotifier
from fitlog.services.streak import StreakEngine
from fitlog.services.uploads import UploadService


@lru_cache()
def get_db() -> DatabaseService:
    return DatabaseService()


@lru_cache()
def get_file_store() -> FileStore:
    return SupabaseFileStore(get_settings())


@lru_cache()
def get_sender() -> EmailSender:
    return EmailSender(get_settings())


def get_streak_engine(
    db: DatabaseService = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> StreakEngine:
    return StreakEngine(db, settings)


def get_insight_generator(
    db: DatabaseService = Depends(get_db),
    engine: StreakEngine = Depends(get_streak_engine),
) -> InsightGenerator:
    return InsightGenerator(db, engine)


def get_analytics_service(
    db: DatabaseService = Depends(get_db),
    engine: StreakEngine = Depends(get_streak_engine),
) -> AnalyticsService:
    return AnalyticsService(db, engine)


def get_upload_service(
    db: DatabaseService = Depends(get_db),
    file_store: FileStore = Depends(get_file_store),
    engine: StreakEngine = Depends(get_streak_engine),
    settings: Settings = Depends(get_settings),
) -> UploadService:
    return UploadService(db, file_store, engine, settings)


def get_notifier(
    db: DatabaseService = Depends(get_db),
    engine: StreakEngine = Depends(get_streak_engine),
    insights: InsightGenerator = Depends(get_insight_generator),
    sender: EmailSender = Depends(get_sender),
    settings: Settings = Depends(get_settings),
) -> CycleNotifier:
    return CycleNotifier(db, db, engine, insights, sender, settings)


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    db: DatabaseService = Depends(get_db),
) -> User:
    """User identified by the upstream gateway's ``X-User-Id`` header."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid user ID")

    user = db.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
