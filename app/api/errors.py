"""
Translation of domain errors into HTTP problem responses.

Status codes come from STATUS_BY_ERROR, looked up along the exception's MRO so
that subclasses inherit the mapping of their closest mapped base. Anything that
is not a TimesheetError falls through to 500.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domains.timesheets.exceptions import (
    InputValidationError,
    TimesheetDailyHoursExceededError,
    TimesheetDuplicateEntryError,
    TimesheetEntryAlreadyExistsError,
    TimesheetEntryNotFoundError,
    TimesheetError,
)

logger = logging.getLogger(__name__)

PROBLEM_CONTENT_TYPE = "application/problem+json"
TRACE_ID_HEADER = "X-Request-ID"
SERVER_ERROR_CODE = "Server.Error"

STATUS_BY_ERROR: Dict[Type[Exception], int] = {
    InputValidationError: status.HTTP_400_BAD_REQUEST,
    TimesheetDuplicateEntryError: status.HTTP_400_BAD_REQUEST,
    TimesheetDailyHoursExceededError: status.HTTP_400_BAD_REQUEST,
    TimesheetEntryNotFoundError: status.HTTP_404_NOT_FOUND,
    TimesheetEntryAlreadyExistsError: status.HTTP_409_CONFLICT,
    TimesheetError: status.HTTP_400_BAD_REQUEST,
}


def status_for(exc: Exception) -> int:
    for klass in type(exc).__mro__:
        if klass in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[klass]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def get_trace_id(request: Request) -> str:
    return request.headers.get(TRACE_ID_HEADER) or uuid.uuid4().hex


def problem_response(
    request: Request,
    status_code: int,
    title: str,
    code: str,
    details: Optional[Dict[str, Any]] = None,
    errors: Optional[Dict[str, List[str]]] = None
) -> JSONResponse:
    """Build an application/problem+json response"""
    trace_id = get_trace_id(request)
    problem: Dict[str, Any] = {
        "type": f"https://httpstatuses.com/{status_code}",
        "title": title,
        "status": status_code,
        "code": code,
        "trace_id": trace_id,
    }
    if details:
        problem["details"] = details
    if errors:
        problem["errors"] = errors

    return JSONResponse(
        status_code=status_code,
        content=problem,
        media_type=PROBLEM_CONTENT_TYPE,
        headers={TRACE_ID_HEADER: trace_id},
    )


async def timesheet_error_handler(request: Request, exc: TimesheetError) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(f"Domain error {exc.code} ({status_code}) on {request.method} {request.url.path}: {exc.message}")
    return problem_response(
        request,
        status_code,
        exc.message,
        exc.code,
        details=exc.details,
        errors=getattr(exc, "errors", None),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await timesheet_error_handler(request, InputValidationError.from_pydantic_errors(exc.errors()))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred.",
        SERVER_ERROR_CODE,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TimesheetError, timesheet_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
