"""
Error taxonomy for the shared-expense core.

Every failure surfaced to a caller is a GastosError subclass carrying a stable
code (the string sent in the response envelope) and the HTTP status used by
the API layer. Services raise these; endpoints never build error responses by
hand.
"""

from __future__ import annotations

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class GastosError(Exception):
    code = "internal"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class InvalidArgument(GastosError):
    """Caller-supplied data failed validation. Never retried."""
    code = "invalid-argument"
    http_status = status.HTTP_400_BAD_REQUEST


class Unauthenticated(GastosError):
    code = "unauthenticated"
    http_status = status.HTTP_401_UNAUTHORIZED


class PermissionDenied(GastosError):
    code = "permission-denied"
    http_status = status.HTTP_403_FORBIDDEN


class NotFound(GastosError):
    code = "not-found"
    http_status = status.HTTP_404_NOT_FOUND


class InvalidState(GastosError):
    """Entity is not in the lifecycle state the operation requires."""
    code = "failed-precondition"
    http_status = status.HTTP_412_PRECONDITION_FAILED


class AlreadyExists(GastosError):
    code = "already-exists"
    http_status = status.HTTP_409_CONFLICT


class Expired(GastosError):
    code = "deadline-exceeded"
    http_status = status.HTTP_410_GONE


class Exhausted(GastosError):
    code = "resource-exhausted"
    http_status = status.HTTP_429_TOO_MANY_REQUESTS


class StorageFailure(GastosError):
    """The document store was unavailable or rejected a write."""
    code = "internal"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR


async def gastos_error_handler(request: Request, exc: GastosError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Only the first problem is reported, same as InvalidArgument raised by services.
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return JSONResponse(
        status_code=InvalidArgument.http_status,
        content=InvalidArgument(message).to_dict()
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": {"code": "internal", "message": "Error interno del servidor"}}
    )
