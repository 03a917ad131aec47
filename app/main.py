import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.http.health import router as health_router
from app.api.http.timesheets import router as timesheets_router
from app.config import Settings, settings as default_settings
from app.core.locks import KeyedLock
from app.db.repositories.timesheet_repository import InMemoryTimesheetEntryRepository
from app.domains.timesheets.services import TimesheetEntryService

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # entries never outlive the application that owns them
    repository = app.state.timesheet_repository
    logger.info(f"Shutting down, dropping {repository.count()} timesheet entries")
    repository.clear()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application together with the store it owns"""
    settings = settings or default_settings

    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT)

    app = FastAPI(
        lifespan=lifespan,
        title=settings.APP_TITLE,
        description="Timesheet tracking: record, edit and summarize hours worked per project",
        version=settings.APP_VERSION
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # The store lives exactly as long as this application instance
    repository = InMemoryTimesheetEntryRepository()
    app.state.settings = settings
    app.state.timesheet_repository = repository
    app.state.timesheet_service = TimesheetEntryService(
        repository,
        daily_hours_cap=settings.DAILY_HOURS_CAP,
        locks=KeyedLock()
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(timesheets_router)

    @app.get("/")
    async def root():
        return {
            "message": settings.APP_TITLE,
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    logger.info(f"{settings.APP_TITLE} {settings.APP_VERSION} ready, daily cap {settings.DAILY_HOURS_CAP}h")
    return app


app = create_app()
