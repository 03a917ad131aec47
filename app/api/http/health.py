from fastapi import APIRouter, Depends

from app.core.dependencies import get_repository
from app.db.repositories.timesheet_repository import InMemoryTimesheetEntryRepository

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(repository: InMemoryTimesheetEntryRepository = Depends(get_repository)):
    """Liveness check with the number of stored entries"""
    return {"status": "ok", "entries": repository.count()}
