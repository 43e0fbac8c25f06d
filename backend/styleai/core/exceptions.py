"""
Centralized exception handling for the StyleAI backend.
Provides consistent error responses across all endpoints.

The error taxonomy mirrors what the pipelines can report to a caller:
invalid_input, rate_limited, quota_exhausted, upstream_unavailable and
misconfigured. Malformed model output is never an error here; the
pipelines degrade instead.
"""
import logging
import traceback
from typing import Any, Dict, Optional
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


# =============================================================================
# Custom Exception Classes
# =============================================================================

class StyleAIException(Exception):
    """Base exception for StyleAI application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "internal_error"
        self.details = details or {}
        super().__init__(message)


class InvalidInputError(StyleAIException):
    """Malformed or missing request fields. Rejected before any upstream call."""

    def __init__(self, message: str, field: Optional[str] = None, error_code: str = "invalid_input"):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            details={"field": field} if field else {}
        )


class MissingLabelError(InvalidInputError):
    """Product search was asked for an item without a usable label."""

    def __init__(self, message: str = "No item provided"):
        super().__init__(message, field="item.label", error_code="missing_label")


class AuthenticationError(StyleAIException):
    """No caller identity was supplied."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="authentication_error"
        )


class NotFoundError(StyleAIException):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="not_found",
            details={"resource": resource, "id": resource_id}
        )


class UpstreamError(StyleAIException):
    """Base class for failures of the upstream AI capability."""


class RateLimitedError(UpstreamError):
    """Upstream throttling (429). Safe to retry after backoff."""

    def __init__(self, message: str = "Rate limit exceeded. Please try again in a moment."):
        super().__init__(
            message=message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error_code="rate_limited"
        )


class QuotaExhaustedError(UpstreamError):
    """Upstream billing or quota exhausted (402). Needs operator action."""

    def __init__(self, message: str = "AI credits exhausted. Please add credits to continue."):
        super().__init__(
            message=message,
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            error_code="quota_exhausted"
        )


class UpstreamUnavailableError(UpstreamError):
    """Any other upstream failure, including timeouts. Retryable."""

    def __init__(self, message: str = "The AI service is unavailable. Please try again."):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="upstream_unavailable"
        )


class MisconfiguredError(UpstreamError):
    """Deployment error such as a missing upstream credential."""

    def __init__(self, message: str = "Service configuration error. Please try again later."):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="misconfigured"
        )


# =============================================================================
# Error Response Model
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response format."""
    success: bool = False
    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None


# =============================================================================
# Exception Handlers for FastAPI
# =============================================================================

async def styleai_exception_handler(request: Request, exc: StyleAIException) -> JSONResponse:
    """Handle StyleAI custom exceptions."""
    if exc.status_code >= 500:
        logger.error(f"StyleAIException: {exc.error_code} - {exc.message}", extra={"details": exc.details})
    else:
        logger.info(f"StyleAIException: {exc.error_code} - {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error_code=exc.error_code,
            message=exc.message,
            details=exc.details if exc.details else None
        ).model_dump(exclude_none=True)
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed request bodies as invalid_input (400)."""
    fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()]
    fields = [f for f in fields if f]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error_code="invalid_input",
            message="Invalid request body",
            details={"fields": fields} if fields else None
        ).model_dump(exclude_none=True)
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTPExceptions with consistent format."""
    error_code = "http_error"
    if exc.status_code == 400:
        error_code = "invalid_input"
    elif exc.status_code == 401:
        error_code = "authentication_error"
    elif exc.status_code == 404:
        error_code = "not_found"
    elif exc.status_code >= 500:
        error_code = "server_error"

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error_code=error_code,
            message=str(exc.detail)
        ).model_dump(exclude_none=True)
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with logging."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
        exc_info=True,
        extra={"path": request.url.path, "method": request.method}
    )

    # In production, don't expose internal error details
    from styleai.config import settings
    is_dev = settings.is_development

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error_code="internal_error",
            message=str(exc) if is_dev else "An unexpected error occurred. Please try again.",
            details={"traceback": traceback.format_exc()} if is_dev else None
        ).model_dump(exclude_none=True)
    )

