"""Application-specific exceptions for consistent error handling."""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Application error with standardized error code."""

    default_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | list[Any] | None = None,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ):
        """Initialize application error."""
        status_code = status_code or self.default_status_code
        code = code or self.default_code
        super().__init__(
            status_code=status_code,
            detail={
                "code": code,
                "message": message,
                "details": details,
            },
        )
        self.code = code
        self.message = message
        self.details = details


class ValidationError(AppError):
    """Malformed submission, invalid test structure or invalid timing window."""

    default_status_code = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_ERROR"


class AuthorizationError(AppError):
    """Caller may not see or change the requested resource."""

    default_status_code = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"


class NotFoundError(AppError):
    """Referenced test or attempt does not exist."""

    default_status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class ConflictError(AppError):
    """Change would invalidate already persisted attempts."""

    default_status_code = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"


class RateLimitedError(AppError):
    default_status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_code = "RATE_LIMITED"


class InternalError(AppError):
    """Unexpected persistence/runtime failure. Message is generic by construction."""

    def __init__(self, message: str = "An internal server error occurred"):
        super().__init__(message)


def raise_app_error(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | list[Any] | None = None,
) -> None:
    """Raise an application error with standardized format."""
    raise AppError(message, details, status_code=status_code, code=code)
