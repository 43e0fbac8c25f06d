"""
Core module for the StyleAI backend.
Contains exception handling and shared request dependencies.
"""
from .exceptions import (
    StyleAIException,
    InvalidInputError,
    MissingLabelError,
    AuthenticationError,
    NotFoundError,
    UpstreamError,
    RateLimitedError,
    QuotaExhaustedError,
    UpstreamUnavailableError,
    MisconfiguredError,
    ErrorResponse,
    styleai_exception_handler,
    request_validation_exception_handler,
    http_exception_handler,
    generic_exception_handler,
)

__all__ = [
    "StyleAIException",
    "InvalidInputError",
    "MissingLabelError",
    "AuthenticationError",
    "NotFoundError",
    "UpstreamError",
    "RateLimitedError",
    "QuotaExhaustedError",
    "UpstreamUnavailableError",
    "MisconfiguredError",
    "ErrorResponse",
    "styleai_exception_handler",
    "request_validation_exception_handler",
    "http_exception_handler",
    "generic_exception_handler",
]
