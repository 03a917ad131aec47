from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.api.http.timesheets import utc_today
from app.config import Settings
from app.core.locks import KeyedLock
from app.db.repositories.timesheet_repository import InMemoryTimesheetEntryRepository
from app.domains.timesheets.services import TimesheetEntryService
from app.main import create_app
from tests.helpers import MONDAY


@pytest.fixture
def repository():
    return InMemoryTimesheetEntryRepository()


@pytest.fixture
def service(repository):
    return TimesheetEntryService(repository, daily_hours_cap=Decimal("12"), locks=KeyedLock())


@pytest.fixture
def settings():
    # MAX_ENTRY_AGE_DAYS=0 lets tests use fixed past dates
    return Settings(MAX_ENTRY_AGE_DAYS=0, LOG_LEVEL="WARNING")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def week_start():
    return MONDAY


@pytest.fixture
def recent_day():
    """A date inside the default 14-day window"""
    return utc_today() - timedelta(days=2)
