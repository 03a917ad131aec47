from fastapi import Request

from app.config import Settings
from app.db.repositories.timesheet_repository import InMemoryTimesheetEntryRepository
from app.domains.timesheets.services import TimesheetEntryService


# Instances are created once by create_app() and live on app.state
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> InMemoryTimesheetEntryRepository:
    return request.app.state.timesheet_repository


def get_timesheet_service(request: Request) -> TimesheetEntryService:
    return request.app.state.timesheet_service
