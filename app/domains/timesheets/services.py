import logging
import uuid
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Union, TYPE_CHECKING

from app.core.locks import KeyedLock
from app.domains.timesheets.entities import TimesheetEntry
from app.domains.timesheets.exceptions import (
    TimesheetDailyHoursExceededError,
    TimesheetDuplicateEntryError,
    TimesheetEntryNotFoundError,
    TimesheetError,
)

if TYPE_CHECKING:
    from app.db.repositories.timesheet_repository import InMemoryTimesheetEntryRepository

logger = logging.getLogger(__name__)

DEFAULT_DAILY_HOURS_CAP = Decimal("12")
WEEK_LENGTH_DAYS = 7


class TimesheetEntryService:
    """Business rules and weekly views over timesheet entries.

    Every mutation runs its checks and the write while holding the locks of
    the (user_id, date) days it touches, so two concurrent requests for the
    same day cannot both pass validation.
    """

    def __init__(
        self,
        repository: "InMemoryTimesheetEntryRepository",
        daily_hours_cap: Union[Decimal, int, float, str] = DEFAULT_DAILY_HOURS_CAP,
        locks: Optional[KeyedLock] = None
    ):
        self.repository = repository
        self.daily_hours_cap = Decimal(str(daily_hours_cap))
        self.locks = locks or KeyedLock()

    def add_entry(self, entry: TimesheetEntry) -> TimesheetEntry:
        """Validate and store a new entry"""
        with self.locks.hold(entry.day_key):
            try:
                self._ensure_daily_hours_not_exceeded(entry, None)
                self._ensure_not_duplicated(entry, None)
            except TimesheetError as e:
                logger.warning(f"Rejected new entry for user {entry.user_id} on {entry.date}: {e.code}")
                raise
            created = self.repository.add(entry)

        logger.info(
            f"Added entry {created.id}: user {created.user_id}, project {created.project_id}, "
            f"{created.date}, {created.hours}h"
        )
        return created

    def update_entry(self, entry: TimesheetEntry) -> TimesheetEntry:
        """Re-validate and replace an existing entry"""
        while True:
            existing = self._ensure_entry_exists(entry.id)
            with self.locks.hold(existing.day_key, entry.day_key):
                current = self._ensure_entry_exists(entry.id)
                if current.day_key != existing.day_key:
                    # moved to another day while we waited for the locks
                    continue
                try:
                    self._ensure_daily_hours_not_exceeded(entry, current)
                    self._ensure_not_duplicated(entry, current.id)
                except TimesheetError as e:
                    logger.warning(f"Rejected update of entry {entry.id}: {e.code}")
                    raise
                updated = self.repository.update(entry)
                break

        logger.info(f"Updated entry {updated.id}: project {updated.project_id}, {updated.date}, {updated.hours}h")
        return updated

    def delete_entry(self, entry_id: uuid.UUID) -> None:
        """Remove an existing entry"""
        existing = self._ensure_entry_exists(entry_id)
        with self.locks.hold(existing.day_key):
            self.repository.delete(entry_id)
        logger.info(f"Deleted entry {entry_id}")

    def get_entry(self, entry_id: uuid.UUID) -> TimesheetEntry:
        return self._ensure_entry_exists(entry_id)

    def get_entries_for_user(self, user_id: int) -> List[TimesheetEntry]:
        return self.repository.get_for_user(user_id)

    def get_entries_for_user_week(self, user_id: int, week_start: date) -> List[TimesheetEntry]:
        """Entries in the 7-day window starting at week_start (no weekday normalization)"""
        week_end = week_start + timedelta(days=WEEK_LENGTH_DAYS - 1)
        return self.repository.get_for_user_between(user_id, week_start, week_end)

    def get_total_hours_per_project(self, user_id: int, week_start: date) -> Dict[int, Decimal]:
        """Hours of the week summed per project, ordered by project id"""
        totals: Dict[int, Decimal] = defaultdict(Decimal)
        for entry in self.get_entries_for_user_week(user_id, week_start):
            totals[entry.project_id] += entry.hours
        return {project_id: totals[project_id] for project_id in sorted(totals)}

    def _ensure_entry_exists(self, entry_id: uuid.UUID) -> TimesheetEntry:
        existing = self.repository.get_by_id(entry_id)
        if existing is None:
            raise TimesheetEntryNotFoundError(entry_id)
        return existing

    def _ensure_not_duplicated(self, entry: TimesheetEntry, exclude_id: Optional[uuid.UUID]) -> None:
        same_day = self.repository.get_for_user_between(entry.user_id, entry.date, entry.date)
        for other in same_day:
            if other.project_id == entry.project_id and other.id != exclude_id:
                raise TimesheetDuplicateEntryError(entry.user_id, entry.project_id, entry.date, other.id)

    def _ensure_daily_hours_not_exceeded(
        self,
        entry: TimesheetEntry,
        existing: Optional[TimesheetEntry]
    ) -> None:
        same_day = self.repository.get_for_user_between(entry.user_id, entry.date, entry.date)
        current_total = sum((e.hours for e in same_day), Decimal("0"))

        # the prior version of an updated entry is replaced, not added to
        if existing is not None and existing.day_key == entry.day_key:
            current_total -= existing.hours

        if current_total + entry.hours > self.daily_hours_cap:
            raise TimesheetDailyHoursExceededError(
                self.daily_hours_cap - current_total,
                entry.date,
                self.daily_hours_cap
            )
