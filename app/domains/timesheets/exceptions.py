import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional


class TimesheetError(Exception):
    """Base class for timesheet domain errors.

    ``code`` is a stable, machine-readable identifier; ``details`` carries the
    structured context a client needs to render the error.
    """

    code = "Timesheet.Error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})


class TimesheetEntryNotFoundError(TimesheetError):
    """Operation referenced an unknown entry id"""

    code = "Timesheet.EntryDoesNotExist"

    def __init__(self, entry_id: uuid.UUID):
        super().__init__(
            f"Timesheet entry with ID '{entry_id}' does not exist.",
            {"entry_id": str(entry_id)},
        )
        self.entry_id = entry_id


class TimesheetEntryAlreadyExistsError(TimesheetError):
    """An entry with the same id is already stored"""

    code = "Timesheet.EntryAlreadyExists"

    def __init__(self, entry_id: uuid.UUID):
        super().__init__(
            f"Timesheet entry with ID '{entry_id}' already exists.",
            {"entry_id": str(entry_id)},
        )
        self.entry_id = entry_id


class TimesheetDuplicateEntryError(TimesheetError):
    """The user already logged hours on this project for this day"""

    code = "Timesheet.DuplicateEntry"

    def __init__(
        self,
        user_id: int,
        project_id: int,
        entry_date: date,
        existing_entry_id: Optional[uuid.UUID] = None,
    ):
        details = {
            "user_id": user_id,
            "project_id": project_id,
            "date": entry_date.isoformat(),
        }
        if existing_entry_id is not None:
            details["existing_entry_id"] = str(existing_entry_id)
        super().__init__(
            "A timesheet entry with the same user, project, and date already exists.",
            details,
        )
        self.user_id = user_id
        self.project_id = project_id
        self.date = entry_date
        self.existing_entry_id = existing_entry_id


class TimesheetDailyHoursExceededError(TimesheetError):
    """The day's total would go over the daily cap"""

    code = "Timesheet.DailyHoursExceeded"

    def __init__(self, hours_left: Decimal, entry_date: date, daily_cap: Decimal):
        super().__init__(
            f"A single day can only have a maximum of {daily_cap} hours of work. "
            f"You have only {hours_left} hours left for the day {entry_date.isoformat()}.",
            {
                "date": entry_date.isoformat(),
                "hours_left": float(hours_left),
                "daily_cap": float(daily_cap),
            },
        )
        self.hours_left = hours_left
        self.date = entry_date
        self.daily_cap = daily_cap


class InputValidationError(TimesheetError):
    """Boundary-level field constraints were violated.

    Raised by the HTTP layer, never by the service. ``errors`` maps a field
    name to the list of messages for that field.
    """

    code = "Timesheet.ValidationFailed"

    def __init__(
        self,
        errors: Dict[str, List[str]],
        message: str = "One or more validation errors occurred.",
    ):
        super().__init__(message)
        self.errors = {field: list(messages) for field, messages in errors.items()}

    @classmethod
    def single(cls, field: str, message: str) -> "InputValidationError":
        return cls({field: [message]})

    @classmethod
    def from_pydantic_errors(cls, raw_errors) -> "InputValidationError":
        """Group pydantic/FastAPI error dicts by field name"""
        errors: Dict[str, List[str]] = {}
        for error in raw_errors:
            loc = list(error.get("loc", ()))
            # first element is the request section: body, query, path
            section = str(loc[0]) if loc else "request"
            # int parts are positions in the raw payload, not field names
            names = [part for part in loc[1:] if isinstance(part, str)]
            if error.get("type") == "json_invalid" or not names:
                field = section
            else:
                field = ".".join(names)
            errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
        return cls(errors)
