"""
riderlink/core/exceptions.py
─────────────────────────────
Error taxonomy and the global handlers that turn it into JSON responses.

Every error leaves the API in the same envelope:
    {"error_code": "...", "message": "...", "details": {...}}

  UnauthenticatedError    401  no / invalid / revoked session
  ForbiddenError          403  authenticated, role not in the allow-list
  ValidationFailedError   400  malformed or missing fields (field-level detail)
  NotFoundError           404  referenced id absent
  ConflictError           409  unique business key already taken
  RepositoryTimeoutError  503  storage call exceeded its time budget
  anything else           500  generic message, traceback only in the log
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from riderlink.core.config import settings
from riderlink.core.security import decode_session_token

log = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class UnauthenticatedError(AppException):
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(
            message=message,
            error_code="ERR_AUTH_001",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class ForbiddenError(AppException):
    def __init__(self, message: str = "Forbidden", details: Optional[dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
        )


class ValidationFailedError(AppException):
    """Raised for field-level problems found after pydantic parsing (e.g. dangling references)."""

    def __init__(self, errors: list[dict[str, str]], message: str = "Validation error"):
        super().__init__(
            message=message,
            error_code="ERR_VALIDATION",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"errors": errors},
        )

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailedError":
        return cls([{"field": field, "message": message}])


class NotFoundError(AppException):
    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id},
        )


class ConflictError(AppException):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="ERR_CONFLICT_001",
            status_code=status.HTTP_409_CONFLICT,
            details={"field": field} if field else {},
        )


class RepositoryTimeoutError(AppException):
    def __init__(self, operation: str, timeout: float):
        super().__init__(
            message="Storage did not respond in time",
            error_code="ERR_TIMEOUT_001",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"operation": operation, "timeout_seconds": timeout},
        )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

_HTTP_ERROR_CODES = {
    400: "ERR_BAD_REQUEST",
    401: "ERR_AUTH_001",
    403: "ERR_PERM_001",
    404: "ERR_NOT_FOUND",
    405: "ERR_METHOD_NOT_ALLOWED",
}


def _loc_to_field(loc: tuple | list) -> str:
    # ("body", "scheduledDate") -> "scheduledDate"; ("query", "limit") -> "limit"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "cookie", "header")]
    return ".".join(parts) or "body"


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": _HTTP_ERROR_CODES.get(exc.status_code, "ERR_HTTP"),
            "message": exc.detail,
            "details": {},
        },
        headers=getattr(exc, "headers", None),
    )


def _session_error(request: Request) -> Optional[UnauthenticatedError]:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return UnauthenticatedError()
    claims = decode_session_token(token)
    revoked = getattr(request.app.state, "revoked_sessions", None)
    if claims is None or (revoked is not None and revoked.is_revoked(claims.session_id)):
        return UnauthenticatedError("Session expired or invalid")
    return None


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Bodies are decoded before auth dependencies run; a missing session wins.
    path = request.url.path
    if path.startswith(settings.API_PREFIX) and path != f"{settings.API_PREFIX}/auth/login":
        unauthenticated = _session_error(request)
        if unauthenticated is not None:
            return await app_exception_handler(request, unauthenticated)

    errors = [
        {"field": _loc_to_field(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error_code": "ERR_VALIDATION",
            "message": "Validation error",
            "details": {"errors": errors},
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "Server error",
            "details": {},
        },
    )
