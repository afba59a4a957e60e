"""API routes for uploads, logs, analytics and notifications."""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import BaseModel

from fitlog.api.deps import (
    get_analytics_service,
    get_current_user,
    get_db,
    get_insight_generator,
    get_notifier,
    get_streak_engine,
    get_upload_service,
)
from fitlog.db.storage import FileStoreError
from fitlog.db.supabase import DatabaseService
from fitlog.models.tracking import ActivityLog, AnalyticsReport, Category, InsightsReport
from fitlog.models.user import NotificationSettings, User, UserStreakState
from fitlog.services.analytics import AnalyticsService
from fitlog.services.insights import InsightGenerator
from fitlog.services.notifier import CycleNotifier
from fitlog.services.streak import StreakEngine, StreakUpdateConflict
from fitlog.services.uploads import UploadResult, UploadService, UploadValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["FitLog"])


class LogListResponse(BaseModel):
    """Recent logs."""
    logs: List[ActivityLog]


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


class NotificationSettingsResponse(BaseModel):
    """Current notification preferences."""
    notification_settings: NotificationSettings


@router.post("/upload", response_model=UploadResult)
def upload_activity(
    image: UploadFile = File(...),
    type: Category = Form(...),
    title: str = Form(...),
    description: str = Form(""),
    user: User = Depends(get_current_user),
    uploads: UploadService = Depends(get_upload_service),
):
    """
    Upload a workout or meal photo.

    The image is stored first; the log and streak update only happen once
    storage succeeded.
    """
    data = image.file.read()
    try:
        return uploads.upload(
            user,
            data,
            filename=image.filename or "photo.jpg",
            content_type=image.content_type or "",
            category=type,
            title=title,
            description=description,
        )
    except UploadValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FileStoreError as e:
        logger.error("Upload storage failed for %s: %s", user.id, e)
        raise HTTPException(status_code=500, detail="Failed to upload image to storage. Please try again.")
    except StreakUpdateConflict as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/logs", response_model=LogListResponse)
async def list_logs(
    limit: int = Query(10, ge=1, le=100),
    type: Optional[Category] = None,
    user: User = Depends(get_current_user),
    db: DatabaseService = Depends(get_db),
):
    """Most recent logs, optionally filtered by category."""
    return LogListResponse(logs=db.get_recent_logs(user.id, limit=limit, category=type))


@router.get("/logs/{log_id}", response_model=ActivityLog)
async def get_log(
    log_id: UUID,
    user: User = Depends(get_current_user),
    db: DatabaseService = Depends(get_db),
):
    log = db.get_log(user.id, log_id)
    if not log:
        raise HTTPException(status_code=404, detail="Log not found")
    return log


@router.delete("/logs/{log_id}", response_model=MessageResponse)
def delete_log(
    log_id: UUID,
    user: User = Depends(get_current_user),
    uploads: UploadService = Depends(get_upload_service),
):
    """Delete a log and its stored photo."""
    if not uploads.delete(user, log_id):
        raise HTTPException(status_code=404, detail="Log not found")
    return MessageResponse(message="Log deleted successfully")


@router.get("/stats", response_model=UserStreakState)
async def get_stats(user: User = Depends(get_current_user)):
    """Current streak counters."""
    return user.stats


@router.get("/analytics", response_model=AnalyticsReport)
async def get_analytics(
    timeframe: str = "30d",
    start: Optional[datetime] = Query(None, alias="from"),
    end: Optional[datetime] = Query(None, alias="to"),
    user: User = Depends(get_current_user),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    """Charts data for a timeframe (7d, 30d, 90d, otherwise a year) or an explicit range."""
    return analytics.get_report(user.id, timeframe=timeframe, start=start, end=end)


@router.get("/insights", response_model=InsightsReport)
async def get_insights(
    user: User = Depends(get_current_user),
    insights: InsightGenerator = Depends(get_insight_generator),
    engine: StreakEngine = Depends(get_streak_engine),
):
    now = datetime.now(timezone.utc)
    return InsightsReport(
        insights=insights.generate(user.id, now),
        consistency_score=engine.consistency_score(user.id, now),
        generated_at=now,
    )


@router.post("/notifications/check", response_model=MessageResponse)
async def run_notification_checks(notifier: CycleNotifier = Depends(get_notifier)):
    """
    Run the missed-log check and cycle resets.

    Meant for an external cron when the in-process scheduler is disabled.
    """
    await notifier.run_all()
    return MessageResponse(message="Notification checks completed successfully")


@router.get("/settings/notifications", response_model=NotificationSettingsResponse)
async def get_notification_settings(user: User = Depends(get_current_user)):
    return NotificationSettingsResponse(notification_settings=user.notification_settings)


@router.put("/settings/notifications", response_model=NotificationSettingsResponse)
async def update_notification_settings(
    settings: NotificationSettings,
    user: User = Depends(get_current_user),
    db: DatabaseService = Depends(get_db),
):
    updated = db.update_notification_settings(user.id, settings)
    return NotificationSettingsResponse(notification_settings=updated)
