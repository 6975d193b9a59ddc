"""
Middleware package for FastAPI application.
"""

from .rate_limit import RateLimitMiddleware
from .request_context import RequestContextMiddleware, get_client_ip

__all__ = ["RateLimitMiddleware", "RequestContextMiddleware", "get_client_ip"]
