"""
Standard error response models and helpers.

Every error leaves the service in the same envelope:
- `{ "error": "<code>", "message": "...", "details": {...} }`
- unhandled errors add a `timestamp` instead of details
"""
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from domain.errors import DomainError


class ErrorResponse(BaseModel):
    """Standard error body."""
    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(..., description="Error code (e.g. 'InvalidAddress', 'AccountNotFound')")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(default=None, description="Additional error context")
    timestamp: str | None = Field(default=None, description="Set on unexpected server errors")
    available_routes: list[str] | None = Field(default=None, alias="availableRoutes")


def error_response(code: str, message: str, details: dict[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
    """
    Create a standardized error body.

    Args:
        code: Error code written to `error`
        message: Human-readable message
        details: Optional context (omitted when empty)

    Returns:
        dict: { "error": <code>, "message": <message>, ... }
    """
    body = ErrorResponse(error=code, message=message, details=details or None, **extra)
    return body.model_dump(by_alias=True, exclude_none=True)


def domain_error_response(exc: DomainError) -> dict[str, Any]:
    return error_response(exc.code, exc.message, exc.details)


def internal_error_response() -> dict[str, Any]:
    """Generic 500 body; never carries exception text."""
    return error_response(
        "InternalServerError",
        "Internal server error",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
