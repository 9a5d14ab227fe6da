"""Error taxonomy shared by the store, the services and the HTTP layer.

Every error carries a machine-readable ``kind`` and the HTTP status the API
answers with. Routes never build error responses themselves; the handlers
installed by ``install_error_handlers`` translate these exceptions into
``{"message": ..., "kind": ...}`` bodies.
"""

import logging
from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Stable identifiers for every failure the core can report."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    CAPACITY = "capacity"
    INVALID_STATE = "invalid_state"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


class UnalonError(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(UnalonError):
    """Malformed or missing input."""

    kind = ErrorKind.VALIDATION
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request data"


class NotFoundError(UnalonError):
    """An id does not resolve to an entity."""

    kind = ErrorKind.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ConflictError(UnalonError):
    """Duplicate registration, duplicate request or existing participation."""

    kind = ErrorKind.CONFLICT
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Conflict"


class CapacityError(UnalonError):
    """The activity has no seats left."""

    kind = ErrorKind.CAPACITY
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Activity is full"


class InvalidStateError(UnalonError):
    """A transition was attempted on a request that is no longer pending."""

    kind = ErrorKind.INVALID_STATE
    status_code = status.HTTP_409_CONFLICT
    message = "Request is not pending"


class UnauthorizedError(UnalonError):
    """No session, an expired session, or bad credentials."""

    kind = ErrorKind.UNAUTHORIZED
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class ForbiddenError(UnalonError):
    """The caller is authenticated but may not perform the operation."""

    kind = ErrorKind.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class InternalError(UnalonError):
    """Unexpected failure."""


def error_body(exc: UnalonError) -> dict:
    return {"message": exc.message, "kind": exc.kind.value}


def install_error_handlers(app: FastAPI) -> None:
    """Register the exception handlers that map errors to JSON responses."""

    @app.exception_handler(UnalonError)
    async def unalon_error_handler(request: Request, exc: UnalonError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.debug(f"Rejected body for {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(ValidationError()),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(InternalError()),
        )
