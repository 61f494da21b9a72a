"""Error handling and consistent error response format."""

import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from mocktest.core.logging import get_logger

logger = get_logger(__name__)


class ErrorResponse(BaseModel):
    """Failure half of the response envelope.

    Format: {success: false, error, error_code, details, request_id, timestamp}
    """

    success: bool = False
    error: str
    error_code: str
    details: Any | None = None
    request_id: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def get_request_id(request: Request) -> str:
    """Get request ID from request state or generate new one."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return str(uuid.uuid4())


def _error_json(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors (422)."""
    details: list[dict[str, Any]] = [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "issue": error.get("msg", "Validation error"),
            "type": error.get("type", "validation_error"),
        }
        for error in exc.errors()
    ]

    return _error_json(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorResponse(
            error="Invalid request data",
            error_code="VALIDATION_ERROR",
            details=details,
            request_id=get_request_id(request),
        ),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions, including AppError and its subclasses."""
    from mocktest.core.app_exceptions import AppError

    request_id = get_request_id(request)

    if isinstance(exc, AppError):
        response = _error_json(
            exc.status_code,
            ErrorResponse(
                error=exc.message,
                error_code=exc.code,
                details=exc.details,
                request_id=request_id,
            ),
        )
        # Add Retry-After header for rate limiting
        if (
            exc.status_code == status.HTTP_429_TOO_MANY_REQUESTS
            and isinstance(exc.details, dict)
            and exc.details.get("retry_after_seconds")
        ):
            response.headers["Retry-After"] = str(exc.details["retry_after_seconds"])
        return response

    # Standard HTTPException
    details = None
    code = "HTTP_ERROR"
    if isinstance(exc.detail, dict):
        if "code" in exc.detail:
            code = exc.detail["code"]
            message = exc.detail.get("message", "An error occurred")
            details = exc.detail.get("details")
        else:
            details = exc.detail.copy()
            message = details.pop("message", "An error occurred")
    elif isinstance(exc.detail, str):
        message = exc.detail
    else:
        message = str(exc.detail)

    return _error_json(
        exc.status_code,
        ErrorResponse(error=message, error_code=code, details=details, request_id=request_id),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions (500)."""
    request_id = get_request_id(request)

    logger.error(
        "Unhandled exception",
        extra={"request_id": request_id, "path": request.url.path, "error_type": type(exc).__name__},
        exc_info=exc,
    )

    # In production, don't expose internal error details
    from mocktest.core.config import settings

    if settings.ENV == "prod":
        message = "An internal server error occurred"
        details = None
    else:
        message = str(exc)
        details = {"type": type(exc).__name__}

    return _error_json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(
            error=message,
            error_code="INTERNAL_ERROR",
            details=details,
            request_id=request_id,
        ),
    )
