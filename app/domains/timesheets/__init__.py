from app.domains.timesheets.entities import TimesheetEntry
from app.domains.timesheets.exceptions import (
    TimesheetError, TimesheetEntryNotFoundError, TimesheetEntryAlreadyExistsError,
    TimesheetDuplicateEntryError, TimesheetDailyHoursExceededError, InputValidationError
)
from app.domains.timesheets.schemas import (
    TimesheetEntryUpsert, TimesheetEntryResponse, ProjectTotalResponse, ApiError
)
from app.domains.timesheets.services import TimesheetEntryService

__all__ = [
    "TimesheetEntry",
    "TimesheetError", "TimesheetEntryNotFoundError", "TimesheetEntryAlreadyExistsError",
    "TimesheetDuplicateEntryError", "TimesheetDailyHoursExceededError", "InputValidationError",
    "TimesheetEntryUpsert", "TimesheetEntryResponse", "ProjectTotalResponse", "ApiError",
    "TimesheetEntryService"
]
