import datetime
import uuid
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_HOURS_PER_ENTRY = Decimal("12")
DESCRIPTION_MAX_LENGTH = 500


class TimesheetEntryUpsert(BaseModel):
    """Body of create and update requests; the entry id comes from the route"""
    user_id: int = Field(..., gt=0)
    project_id: int = Field(..., gt=0)
    date: datetime.date
    hours: Decimal = Field(..., gt=0, le=MAX_HOURS_PER_ENTRY)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)

    @field_validator('description')
    @classmethod
    def normalize_description(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None


class TimesheetEntryResponse(BaseModel):
    """Entry as returned to clients"""
    id: uuid.UUID
    user_id: int
    project_id: int
    date: datetime.date
    hours: float
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProjectTotalResponse(BaseModel):
    """Hours of one project within the requested week"""
    project_id: int
    total_hours: float


class ApiError(BaseModel):
    """Problem document returned for every failed request"""
    type: str
    title: str
    status: int
    code: str
    trace_id: str
    details: Optional[Dict[str, object]] = None
    errors: Optional[Dict[str, List[str]]] = None
