"""Services module."""

from .streak import StreakEngine, StreakUpdateConflict
from .insights import InsightGenerator
from .analytics import AnalyticsService
from .uploads import UploadService, UploadValidationError
from .notifier import CycleNotifier

__all__ = [
    "StreakEngine",
    "StreakUpdateConflict",
    "InsightGenerator",
    "AnalyticsService",
    "UploadService",
    "UploadValidationError",
    "CycleNotifier",
]
