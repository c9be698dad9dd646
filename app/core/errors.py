"""
Exception hierarchy for the badge engine.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.

Only the read APIs ever surface these to a caller. Inside the trigger
dispatcher they are caught, logged and dropped.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class BadgeEngineError(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class BadgeNotFoundError(BadgeEngineError):
    """Catalog lookup miss. Inside the dispatcher this is a configuration error."""
    http_status = status.HTTP_404_NOT_FOUND
    code = "BADGE_NOT_FOUND"

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            message=f"Badge '{key}' is not in the catalog.",
            details={"badge_key": key},
        )


class SourceUnavailableError(BadgeEngineError):
    """A collaborator query failed or timed out."""
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "SOURCE_UNAVAILABLE"

    def __init__(self, family: str, source: str, reason: Optional[str] = None):
        self.family = family
        self.source = source
        details: dict[str, Any] = {"family": family, "source": source}
        if reason:
            details["reason"] = reason
        super().__init__(
            message=f"Source '{source}' is unavailable for the {family} family.",
            details=details,
        )


class UnknownFamilyError(BadgeEngineError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "UNKNOWN_FAMILY"

    def __init__(self, family: str, known: list[str]):
        super().__init__(
            message=f"Unknown badge family '{family}'.",
            details={"family": family, "known": known},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def badge_engine_exception_handler(
    request: Request, exc: BadgeEngineError
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
