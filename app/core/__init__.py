"""
Core building blocks for the phrase sync backend.
Provides the remote store, rate limiting, validation and error handling.
"""

from .store_client import KeyValueStore, MemoryStore, RedisStore, get_store, close_store
from .rate_limiter import RateLimiter, FixedWindowRateLimiter
from .exceptions import PhraseSyncException, StoreError, ErrorCode

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "RedisStore",
    "get_store",
    "close_store",
    "RateLimiter",
    "FixedWindowRateLimiter",
    "PhraseSyncException",
    "StoreError",
    "ErrorCode",
]
