from fastapi import APIRouter, Depends, Query, Response, status
from typing import List
import datetime
import uuid

from app.api.errors import PROBLEM_CONTENT_TYPE
from app.config import Settings
from app.core.dependencies import get_settings, get_timesheet_service
from app.domains.timesheets.entities import TimesheetEntry
from app.domains.timesheets.exceptions import InputValidationError
from app.domains.timesheets.schemas import (
    ApiError, ProjectTotalResponse, TimesheetEntryResponse, TimesheetEntryUpsert
)
from app.domains.timesheets.services import TimesheetEntryService

router = APIRouter(prefix="/timesheets", tags=["timesheets"])

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ApiError, "content": {PROBLEM_CONTENT_TYPE: {}}},
}
NOT_FOUND_RESPONSES = {
    **ERROR_RESPONSES,
    status.HTTP_404_NOT_FOUND: {"model": ApiError, "content": {PROBLEM_CONTENT_TYPE: {}}},
}


def utc_today() -> datetime.date:
    """Current calendar date in UTC, independent of the host timezone"""
    return datetime.datetime.now(datetime.timezone.utc).date()


def _validate_entry_date(entry_date: datetime.date, settings: Settings) -> None:
    """Entries may not be dated in the future nor older than MAX_ENTRY_AGE_DAYS"""
    today = utc_today()
    if entry_date > today:
        raise InputValidationError.single("date", "Date cannot be in the future.")
    if settings.MAX_ENTRY_AGE_DAYS > 0:
        oldest = today - datetime.timedelta(days=settings.MAX_ENTRY_AGE_DAYS)
        if entry_date < oldest:
            raise InputValidationError.single(
                "date",
                f"Date cannot be more than {settings.MAX_ENTRY_AGE_DAYS} days in the past."
            )


def _to_response(entry: TimesheetEntry) -> TimesheetEntryResponse:
    return TimesheetEntryResponse.model_validate(entry)


@router.post(
    "",
    response_model=TimesheetEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES
)
def create_entry(
    entry_data: TimesheetEntryUpsert,
    service: TimesheetEntryService = Depends(get_timesheet_service),
    settings: Settings = Depends(get_settings)
):
    """Record hours worked by a user on a project"""
    _validate_entry_date(entry_data.date, settings)

    entry = TimesheetEntry.create_entry(
        user_id=entry_data.user_id,
        project_id=entry_data.project_id,
        date=entry_data.date,
        hours=entry_data.hours,
        description=entry_data.description
    )
    return _to_response(service.add_entry(entry))


@router.get("", response_model=List[TimesheetEntryResponse], responses=ERROR_RESPONSES)
def get_user_entries(
    user_id: int = Query(..., gt=0),
    service: TimesheetEntryService = Depends(get_timesheet_service)
):
    """All entries of a user, oldest first"""
    return [_to_response(entry) for entry in service.get_entries_for_user(user_id)]


@router.get("/week", response_model=List[TimesheetEntryResponse], responses=ERROR_RESPONSES)
def get_week(
    user_id: int = Query(..., gt=0),
    start_date: datetime.date = Query(...),
    service: TimesheetEntryService = Depends(get_timesheet_service)
):
    """Entries of a user in [start_date, start_date + 6 days]"""
    entries = service.get_entries_for_user_week(user_id, start_date)
    return [_to_response(entry) for entry in entries]


@router.get("/project-totals", response_model=List[ProjectTotalResponse], responses=ERROR_RESPONSES)
def get_project_totals(
    user_id: int = Query(..., gt=0),
    start_date: datetime.date = Query(...),
    service: TimesheetEntryService = Depends(get_timesheet_service)
):
    """Hours per project for the week starting at start_date, by project id"""
    totals = service.get_total_hours_per_project(user_id, start_date)
    return [
        ProjectTotalResponse(project_id=project_id, total_hours=float(hours))
        for project_id, hours in totals.items()
    ]


@router.get("/{entry_id}", response_model=TimesheetEntryResponse, responses=NOT_FOUND_RESPONSES)
def get_entry(
    entry_id: uuid.UUID,
    service: TimesheetEntryService = Depends(get_timesheet_service)
):
    return _to_response(service.get_entry(entry_id))


@router.put("/{entry_id}", response_model=TimesheetEntryResponse, responses=NOT_FOUND_RESPONSES)
def update_entry(
    entry_id: uuid.UUID,
    entry_data: TimesheetEntryUpsert,
    service: TimesheetEntryService = Depends(get_timesheet_service),
    settings: Settings = Depends(get_settings)
):
    """Replace an entry; the id is taken from the route, never from the body"""
    _validate_entry_date(entry_data.date, settings)

    entry = TimesheetEntry(
        id=entry_id,
        user_id=entry_data.user_id,
        project_id=entry_data.project_id,
        date=entry_data.date,
        hours=entry_data.hours,
        description=entry_data.description
    )
    return _to_response(service.update_entry(entry))


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND_RESPONSES)
def delete_entry(
    entry_id: uuid.UUID,
    service: TimesheetEntryService = Depends(get_timesheet_service)
):
    service.delete_entry(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
