import logging
import threading
import uuid
from datetime import date
from typing import Dict, List, Optional

from app.domains.timesheets.entities import TimesheetEntry
from app.domains.timesheets.exceptions import (
    TimesheetEntryAlreadyExistsError,
    TimesheetEntryNotFoundError,
)

logger = logging.getLogger(__name__)


class InMemoryTimesheetEntryRepository:
    """Thread-safe in-memory storage for timesheet entries.

    Entries are copied on the way in and on the way out, so callers never hold
    a reference into the stored state.
    """

    def __init__(self):
        self._entries: Dict[uuid.UUID, TimesheetEntry] = {}
        self._lock = threading.RLock()

    def add(self, entry: TimesheetEntry) -> TimesheetEntry:
        """Insert a new entry"""
        with self._lock:
            if entry.id in self._entries:
                raise TimesheetEntryAlreadyExistsError(entry.id)
            self._entries[entry.id] = entry.copy()
        logger.debug(f"Stored timesheet entry {entry.id}")
        return entry.copy()

    def update(self, entry: TimesheetEntry) -> TimesheetEntry:
        """Replace the entry with the same id"""
        with self._lock:
            if entry.id not in self._entries:
                raise TimesheetEntryNotFoundError(entry.id)
            self._entries[entry.id] = entry.copy()
        logger.debug(f"Replaced timesheet entry {entry.id}")
        return entry.copy()

    def delete(self, entry_id: uuid.UUID) -> None:
        """Remove an entry by id"""
        with self._lock:
            if self._entries.pop(entry_id, None) is None:
                raise TimesheetEntryNotFoundError(entry_id)
        logger.debug(f"Removed timesheet entry {entry_id}")

    def get_by_id(self, entry_id: uuid.UUID) -> Optional[TimesheetEntry]:
        with self._lock:
            entry = self._entries.get(entry_id)
            return entry.copy() if entry else None

    def get_for_user(self, user_id: int) -> List[TimesheetEntry]:
        """All entries of a user, oldest first"""
        with self._lock:
            entries = [e.copy() for e in self._entries.values() if e.user_id == user_id]
        return sorted(entries, key=lambda e: e.date)

    def get_for_user_between(
        self,
        user_id: int,
        from_date: date,
        to_date: date
    ) -> List[TimesheetEntry]:
        """Entries of a user dated within [from_date, to_date], oldest first"""
        with self._lock:
            entries = [
                e.copy()
                for e in self._entries.values()
                if e.user_id == user_id and from_date <= e.date <= to_date
            ]
        return sorted(entries, key=lambda e: e.date)

    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
