"""Typed service errors and their translation into HTTP responses.

Service code raises these; only the exception handlers registered by
``register_exception_handlers`` turn them into responses. Every error body
uses the same envelope as successful responses::

    {"success": false, "error": {"code": "...", "message": "...", "details": ...}}
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from libs.common.logging import get_logger

logger = get_logger(__name__)


class ServiceError(Exception):
    """Base class for errors that map to a specific response code."""

    code = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailedError(ServiceError):
    """Input is malformed or would break an invariant. Caller must fix it."""

    code = "validation_error"
    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT


class NotFoundError(ServiceError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class CapacityExceededError(ServiceError):
    code = "capacity_exceeded"
    status_code = status.HTTP_409_CONFLICT


class UnauthorizedError(ServiceError):
    code = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(UnauthorizedError):
    """Authenticated, but the caller's role does not allow the operation."""

    status_code = status.HTTP_403_FORBIDDEN


class StoreUnavailableError(ServiceError):
    """The database could not be reached. Transient; the caller may retry."""

    code = "store_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def error_body(code: str, message: str, details: Optional[Any] = None) -> dict:
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.code, exc.message)
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_body(exc.code, exc.message, exc.details)),
        headers=headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=ValidationFailedError.status_code,
        content=jsonable_encoder(
            error_body(ValidationFailedError.code, "Request validation failed", details)
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing handlers on an app."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
