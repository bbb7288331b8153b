"""
Custom exception classes and error handling for Conduit.

Provides consistent error responses across all API endpoints, and the
execution failure raised when an outbound request never gets a response.
"""

import logging
from enum import Enum
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError


logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standard error response format."""
    detail: str
    error_code: str | None = None


class APIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None
    ):
        self.detail = detail
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(detail)


class ResourceNotFoundError(APIException):
    """Exception raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            detail=f"{resource_type} with id {resource_id} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND"
        )


class UnauthorizedError(APIException):
    """Exception raised when the caller presents no valid bearer token."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="UNAUTHORIZED"
        )


class AuthConfigurationError(APIException):
    """Exception raised when bearer tokens cannot be verified for lack of a secret."""

    def __init__(self, detail: str = "Authentication is not configured"):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="AUTH_NOT_CONFIGURED"
        )


class DatabaseError(APIException):
    """Exception raised when a database error occurs."""

    def __init__(self, detail: str = "Database error occurred"):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="DATABASE_ERROR"
        )


class HistoryWriteError(DatabaseError):
    """Exception raised when an execution attempt could not be recorded."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.error_code = "HISTORY_WRITE_FAILED"


class ExecutionErrorKind(str, Enum):
    """Closed set of reasons an outbound request produced no response."""
    NAME_RESOLUTION_FAILED = "name_resolution_failed"
    CONNECTION_REFUSED = "connection_refused"
    TIMED_OUT = "timed_out"
    OTHER = "other"


GENERIC_EXECUTION_MESSAGE = "Request execution failed"

_KIND_MESSAGES = {
    ExecutionErrorKind.NAME_RESOLUTION_FAILED: "DNS lookup failed - Could not resolve hostname",
    ExecutionErrorKind.CONNECTION_REFUSED: "Connection refused - Target server is not responding",
    ExecutionErrorKind.TIMED_OUT: "Request timed out",
}


class ExecutionFailure(Exception):
    """
    Raised when an outbound request could not be completed at the transport level.

    A response with any HTTP status code is never an execution failure; this
    exception only means that no well-formed response was received.

    Attributes:
        kind: Classification of the failure
        detail: Message of the underlying transport error, used for OTHER
    """

    def __init__(self, kind: ExecutionErrorKind, detail: str | None = None):
        self.kind = kind
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """User-facing text, derived from the kind."""
        if self.kind in _KIND_MESSAGES:
            return _KIND_MESSAGES[self.kind]
        return self.detail or GENERIC_EXECUTION_MESSAGE


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handler for custom API exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code}
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    errors = exc.errors()
    # Format validation errors into a readable message
    error_messages = []
    for error in errors:
        loc = " -> ".join(str(l) for l in error["loc"])
        msg = error["msg"]
        error_messages.append(f"{loc}: {msg}")

    detail = "; ".join(error_messages) if error_messages else "Validation error"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": detail, "error_code": "VALIDATION_ERROR"}
    )


async def sqlalchemy_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Handler for SQLAlchemy database errors."""
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred", "error_code": "DATABASE_ERROR"}
    )


async def execution_failure_handler(
    request: Request, exc: ExecutionFailure
) -> JSONResponse:
    """
    Handler for failed request executions.

    statusCode and responseTime are sentinel zeros here; persisted history
    entries use null for the same fields.
    """
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.message, "statusCode": 0, "responseTime": 0}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(ExecutionFailure, execution_failure_handler)
