"""
scout_admin/core/errors.py - Error taxonomy and the JSON error envelope.

Every error leaves the API as:
    {"error": "<human readable message>"}

Handlers raise one of the classes below; the exception handlers registered in
`main.py` turn them (and request validation / unexpected errors) into that shape.
"""
import logging
from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("scout.errors")


class AppError(HTTPException):
    """Base class: an HTTP status plus a default message."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(status_code=type(self).status_code, detail=message or self.default_message)


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self):
        # No detail about why the session was rejected
        super().__init__(self.default_message)


class AuthenticationFailed(AppError):
    """Login credential rejected by the identity provider."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class SelfProtection(Forbidden):
    """A caller acting on their own account in a way that is never allowed."""


class QuotaExceeded(Forbidden):
    def __init__(self, quota: int):
        super().__init__(f"Event quota exceeded. Maximum {quota} event(s) allowed.")
        self.quota = quota


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Conflict(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Already exists"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class MethodNotAllowed(AppError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    default_message = "Method not allowed"


class UpstreamFailure(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Upstream service error"


class LookupFailed(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Lookup failed"


def error_body(message: str) -> dict:
    return {"error": message}


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Convert HTTPException (ours or Starlette's) to the error envelope."""
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed input is a 400 naming the offending field(s)."""
    parts = []
    for err in exc.errors():
        loc = [str(l) for l in err.get("loc", []) if l != "body"]
        field = ".".join(loc)
        msg = err.get("msg", "")
        parts.append(f"{field}: {msg}" if field else msg)
    message = "; ".join(parts) or "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )
