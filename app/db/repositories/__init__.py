from app.db.repositories.timesheet_repository import InMemoryTimesheetEntryRepository

__all__ = [
    "InMemoryTimesheetEntryRepository"
]
