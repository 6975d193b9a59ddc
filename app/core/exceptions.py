"""
Custom exceptions for the phrase sync backend.

Every exception carries the HTTP status it maps to, so handlers can turn
it into a JSON error body without a lookup table.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Sync validation errors
    MISSING_SYNC_KEY = "MISSING_SYNC_KEY"
    INVALID_SYNC_KEY = "INVALID_SYNC_KEY"
    INVALID_PHRASES = "INVALID_PHRASES"
    TOO_MANY_PHRASES = "TOO_MANY_PHRASES"
    INVALID_JSON = "INVALID_JSON"

    # Translation input errors
    MISSING_TEXT = "MISSING_TEXT"
    EMPTY_TEXT = "EMPTY_TEXT"
    TEXT_TOO_LONG = "TEXT_TOO_LONG"

    # Upstream errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    TRANSLATION_NOT_CONFIGURED = "TRANSLATION_NOT_CONFIGURED"
    TRANSLATION_FAILED = "TRANSLATION_FAILED"

    # Rate limiting errors
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Generic errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class PhraseSyncException(Exception):
    """Base exception for the phrase sync backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class RequestValidationFailed(PhraseSyncException):
    """Raised when a request fails boundary validation. Never retried."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=400
        )


class RateLimitExceededError(PhraseSyncException):
    """Raised when a client exceeds its request window."""

    def __init__(self, retry_after_seconds: int = 60):
        super().__init__(
            message="Too many requests. Please try again later.",
            error_code=ErrorCode.RATE_LIMIT_EXCEEDED,
            details={"retry_after_seconds": retry_after_seconds},
            status_code=429
        )
        self.retry_after_seconds = retry_after_seconds


class StoreError(PhraseSyncException):
    """Raised when the remote store is unreachable or fails an operation."""

    def __init__(self, message: str = "Remote store operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.STORE_UNAVAILABLE,
            details=details,
            status_code=500
        )


class TranslationError(PhraseSyncException):
    """Raised when translation fails."""

    def __init__(
        self,
        message: str = "Translation failed",
        error_code: ErrorCode = ErrorCode.TRANSLATION_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=500
        )
