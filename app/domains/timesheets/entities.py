import copy
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple, Union


class TimesheetEntry:
    """One block of hours a user worked on a project on a given day"""

    def __init__(
        self,
        id: uuid.UUID,
        user_id: int,
        project_id: int,
        date: date,
        hours: Union[Decimal, int, float, str],
        description: Optional[str] = None
    ):
        self.id = id
        self.user_id = user_id
        self.project_id = project_id
        self.date = date
        self.hours = hours if isinstance(hours, Decimal) else Decimal(str(hours))
        self.description = description

    @property
    def day_key(self) -> Tuple[int, date]:
        """(user_id, date) pair the daily cap is computed over"""
        return (self.user_id, self.date)

    def copy(self) -> "TimesheetEntry":
        """Detached copy; every field is immutable so a shallow copy is enough"""
        return copy.copy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "project_id": self.project_id,
            "date": self.date,
            "hours": self.hours,
            "description": self.description,
        }

    @classmethod
    def create_entry(
        cls,
        user_id: int,
        project_id: int,
        date: date,
        hours: Union[Decimal, int, float, str],
        description: Optional[str] = None
    ) -> "TimesheetEntry":
        """New entry with a freshly generated id"""
        return cls(
            id=uuid.uuid4(),
            user_id=user_id,
            project_id=project_id,
            date=date,
            hours=hours,
            description=description
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, TimesheetEntry):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return (
            f"TimesheetEntry(id={self.id}, user_id={self.user_id}, "
            f"project_id={self.project_id}, date={self.date}, hours={self.hours})"
        )
