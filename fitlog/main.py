"""Main entry point for FitLog."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from fitlog.api.deps import get_db, get_sender
from fitlog.api.routes import router as api_router
from fitlog.config import get_settings
from fitlog.services.insights import InsightGenerator
from fitlog.services.notifier import CycleNotifier
from fitlog.services.scheduler import NotificationScheduler
from fitlog.services.streak import StreakEngine

logger = logging.getLogger(__name__)


def build_scheduler() -> NotificationScheduler:
    """Scheduler wired to the production collaborators."""
    settings = get_settings()
    db = get_db()
    engine = StreakEngine(db, settings)
    notifier = CycleNotifier(db, db, engine, InsightGenerator(db, engine), get_sender(), settings)
    return NotificationScheduler(notifier, settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the notification scheduler alongside the API."""
    scheduler = None
    if get_settings().enable_scheduler:
        scheduler = build_scheduler()
        scheduler.start()
    try:
        yield
    finally:
        if scheduler:
            scheduler.stop()


def create_app() -> FastAPI:
    app = FastAPI(
        title="FitLog API",
        description="Photo-based workout and meal logging with streaks and insights",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(api_router)
    return app


def run():
    """Entry point for running the API server."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting FitLog API...")
    uvicorn.run(create_app(), host="0.0.0.0", port=8000, log_level="warning")


if __name__ == "__main__":
    run()
