"""
Rate limiting middleware for the public endpoints.

Each path prefix gets its own ``RateLimiter``; requests to paths without
a rule pass straight through.
"""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
import asyncio
from typing import Dict, Optional

from app.core.error_handlers import error_handler
from app.core.exceptions import RateLimitExceededError
from app.core.rate_limiter import FixedWindowRateLimiter, RateLimiter
from app.middleware.request_context import get_client_ip


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-client request limiting keyed by forwarded address.

    Args:
        app: ASGI application
        limiters: Mapping of path prefix to the limiter guarding it
    """

    def __init__(self, app, limiters: Optional[Dict[str, RateLimiter]] = None):
        super().__init__(app)
        self.limiters: Dict[str, RateLimiter] = limiters or {}

    def _limiter_for(self, path: str) -> Optional[RateLimiter]:
        for prefix, limiter in self.limiters.items():
            if path == prefix or path.startswith(prefix + "/"):
                return limiter
        return None

    async def dispatch(self, request: Request, call_next):
        """
        Process rate limiting for incoming requests.

        Args:
            request: FastAPI request object
            call_next: Next middleware in chain

        Returns:
            Response object
        """
        limiter = self._limiter_for(request.url.path)
        if limiter is None:
            return await call_next(request)

        client_id = get_client_ip(request)

        if not limiter.allow(client_id):
            exc = RateLimitExceededError(retry_after_seconds=limiter.retry_after(client_id))
            exc.details["client_ip"] = client_id
            return await error_handler.handle_phrase_sync_exception(request, exc)

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limiter.limit)
        return response


async def cleanup_expired_data(limiters: Dict[str, RateLimiter], interval_seconds: float = 300):
    """Periodic cleanup of expired rate limit data."""
    while True:
        await asyncio.sleep(interval_seconds)
        for limiter in limiters.values():
            if isinstance(limiter, FixedWindowRateLimiter):
                limiter.cleanup_expired()
