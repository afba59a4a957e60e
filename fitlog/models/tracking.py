"""Activity log and analytics models."""

from pydantic import BaseModel, Field
from typing import List, Dict, Literal
from datetime import date, datetime
from uuid import UUID


Category = Literal["workout", "meal"]


class ActivityAnalysis(BaseModel):
    """Keyword-based analysis attached to a log."""

    detected_label: str
    confidence: float = Field(ge=0, le=1)
    suggestions: List[str] = []


class StoredFile(BaseModel):
    """Reference returned by the file store."""

    file_ref: str
    view_url: str


class ActivityLogCreate(BaseModel):
    """Data for appending an activity log."""

    user_id: UUID
    category: Category
    timestamp: datetime
    title: str
    description: str = ""
    analysis: ActivityAnalysis
    file: StoredFile


class ActivityLog(ActivityLogCreate):
    """Activity log entry."""

    id: UUID

    class Config:
        from_attributes = True


class WeeklyStats(BaseModel):
    """Counts of logs in the trailing seven days."""

    workouts: int = 0
    meals: int = 0
    total: int = 0


class DailyActivity(BaseModel):
    """Log counts for a single calendar day."""

    day: date
    workouts: int
    meals: int
    total: int


class DailyStreak(BaseModel):
    """Running streak value at the end of a calendar day."""

    day: date
    streak: int


class CategoryBreakdown(BaseModel):
    """Log counts grouped by detected label."""

    workouts: Dict[str, int] = {}
    meals: Dict[str, int] = {}


class AnalyticsReport(BaseModel):
    """Analytics for a date range."""

    start_date: date
    end_date: date
    total_workouts: int
    total_meals: int
    weekly_average: float
    consistency_score: int
    activity_data: List[DailyActivity] = []
    streak_data: List[DailyStreak] = []
    category_breakdown: CategoryBreakdown = CategoryBreakdown()


class InsightsReport(BaseModel):
    """Insights with the score they were derived from."""

    insights: List[str]
    consistency_score: int
    generated_at: datetime
