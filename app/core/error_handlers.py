"""
Error handlers for the FastAPI application.

All errors leave the service as ``{"error": <message>, "error_code": <code>}``.
"""

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import time
from typing import Dict, Any, Optional

from app.core.exceptions import (
    PhraseSyncException,
    RateLimitExceededError,
    ErrorCode,
)
from app.schemas.base import ErrorResponse

logger = logging.getLogger(__name__)


class ErrorHandler:
    """
    Converts exceptions into JSON error responses and keeps per-code counts.
    """

    def __init__(self):
        self.error_counts: Dict[str, int] = {}
        self.last_error_time: Dict[str, float] = {}

    async def handle_phrase_sync_exception(
        self,
        request: Request,
        exc: PhraseSyncException
    ) -> JSONResponse:
        """
        Handle application exceptions with contextual logging.

        Args:
            request: FastAPI request object
            exc: PhraseSyncException instance

        Returns:
            JSONResponse with the exception's status and message
        """
        request_id = getattr(request.state, 'request_id', 'unknown')
        log = logger.error if exc.status_code >= 500 else logger.warning
        cause = exc.__cause__

        log(
            f"{type(exc).__name__} in request {request_id}: {exc.message}",
            extra={
                'request_id': request_id,
                'error_code': exc.error_code.value,
                'status_code': exc.status_code,
                'details': exc.details,
                'cause': str(cause) if cause else None,
                'request_path': request.url.path,
                'request_method': request.method,
            }
        )

        self._track_error(exc.error_code.value)

        headers = None
        if isinstance(exc, RateLimitExceededError):
            headers = {"Retry-After": str(exc.retry_after_seconds)}

        return self._create_error_response(
            error_code=exc.error_code.value,
            message=exc.message,
            status_code=exc.status_code,
            headers=headers
        )

    async def handle_validation_error(
        self,
        request: Request,
        exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors as 400s."""
        request_id = getattr(request.state, 'request_id', 'unknown')
        fields = ['.'.join(str(loc) for loc in error['loc']) for error in exc.errors()]

        logger.warning(
            f"Validation error in request {request_id}: {fields}",
            extra={'request_id': request_id, 'request_path': request.url.path}
        )
        self._track_error(ErrorCode.VALIDATION_ERROR.value)

        return self._create_error_response(
            error_code=ErrorCode.VALIDATION_ERROR.value,
            message="Request validation failed",
            status_code=400
        )

    async def handle_http_exception(
        self,
        request: Request,
        exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle framework HTTP exceptions (404, 405, ...)."""
        error_code_map = {
            400: ErrorCode.VALIDATION_ERROR,
            404: ErrorCode.NOT_FOUND,
            429: ErrorCode.RATE_LIMIT_EXCEEDED,
        }
        error_code = error_code_map.get(exc.status_code, ErrorCode.INTERNAL_SERVER_ERROR)

        return self._create_error_response(
            error_code=error_code.value,
            message=str(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None)
        )

    async def handle_generic_exception(
        self,
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions with full error logging."""
        request_id = getattr(request.state, 'request_id', 'unknown')

        logger.error(
            f"Unhandled exception in request {request_id}: {type(exc).__name__}: {str(exc)}",
            exc_info=exc,
            extra={
                'request_id': request_id,
                'request_path': request.url.path,
                'request_method': request.method,
            }
        )

        self._track_error(ErrorCode.INTERNAL_SERVER_ERROR.value)

        return self._create_error_response(
            error_code=ErrorCode.INTERNAL_SERVER_ERROR.value,
            message="An internal server error occurred",
            status_code=500
        )

    def _create_error_response(
        self,
        error_code: str,
        message: str,
        status_code: int,
        headers: Optional[Dict[str, str]] = None
    ) -> JSONResponse:
        body = ErrorResponse(error=message, error_code=error_code)
        return JSONResponse(
            status_code=status_code,
            content=body.model_dump(),
            headers=headers
        )

    def _track_error(self, error_code: str) -> None:
        self.error_counts[error_code] = self.error_counts.get(error_code, 0) + 1
        self.last_error_time[error_code] = time.time()

        if self.error_counts[error_code] % 10 == 0:
            logger.warning(
                f"High frequency error detected: {error_code} occurred {self.error_counts[error_code]} times"
            )

    def get_error_statistics(self) -> Dict[str, Any]:
        """
        Get error statistics for monitoring.

        Returns:
            Dictionary with error statistics
        """
        current_time = time.time()

        return {
            'error_counts': dict(self.error_counts),
            'recent_errors': {
                code: count for code, count in self.error_counts.items()
                if current_time - self.last_error_time.get(code, 0) < 3600  # Last hour
            },
            'total_errors': sum(self.error_counts.values())
        }


# Global error handler instance
error_handler = ErrorHandler()


def setup_error_handlers(app):
    """
    Set up all error handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(PhraseSyncException)
    async def phrase_sync_exception_handler(request: Request, exc: PhraseSyncException):
        return await error_handler.handle_phrase_sync_exception(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return await error_handler.handle_validation_error(request, exc)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return await error_handler.handle_http_exception(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
        return await error_handler.handle_http_exception(request, exc)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        return await error_handler.handle_generic_exception(request, exc)
