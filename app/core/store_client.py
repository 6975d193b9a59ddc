"""
Remote key/value store for phrase collections.

This module provides a Redis-backed store with lazy connection management
and an in-process store for development and tests. Unlike a cache, store
failures are never hidden: every backend error is logged and re-raised
as ``StoreError`` so the endpoint can answer with a 500.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from redis import asyncio as aioredis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.config.settings import StoreBackend, get_settings
from app.core.exceptions import StoreError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Minimal string key/value contract used by the sync service."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key`` or None."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Overwrite ``key`` with ``value``."""

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class MemoryStore(KeyValueStore):
    """Process-local store. Contents are lost on restart."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value


class RedisStore(KeyValueStore):
    """
    Redis store with a lazily created, reused connection.

    The underlying ``redis.asyncio`` client owns pooling; this class only
    makes sure one client is created per process and maps errors.
    """

    def __init__(self, redis_url: Optional[str] = None, socket_timeout: Optional[float] = None):
        """
        Initialize the store.

        Args:
            redis_url: Redis connection URL (optional, uses settings if not provided)
            socket_timeout: Socket timeout in seconds (optional, uses settings if not provided)
        """
        redis_settings = get_settings().redis
        self.redis_url = redis_url or redis_settings.url
        self.socket_timeout = socket_timeout or redis_settings.socket_timeout
        self.redis_client: Optional[Redis] = None
        self._connection_lock = asyncio.Lock()

    async def _get_client(self) -> Redis:
        if self.redis_client is not None:
            return self.redis_client

        async with self._connection_lock:
            if self.redis_client is None:
                logger.info("Creating Redis client", extra={"redis_url": self._redacted_url()})
                self.redis_client = aioredis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_timeout=self.socket_timeout,
                    socket_connect_timeout=self.socket_timeout,
                    retry_on_timeout=True,
                    health_check_interval=30
                )
        return self.redis_client

    async def get(self, key: str) -> Optional[str]:
        try:
            client = await self._get_client()
            return await client.get(key)
        except (RedisError, OSError, ValueError) as e:
            logger.error(f"Error reading store key '{key}': {e}")
            raise StoreError("Failed to read from remote store", details={"key": key}) from e

    async def set(self, key: str, value: str) -> None:
        try:
            client = await self._get_client()
            await client.set(key, value)
        except (RedisError, OSError, ValueError) as e:
            logger.error(f"Error writing store key '{key}': {e}")
            raise StoreError("Failed to write to remote store", details={"key": key}) from e

    async def ping(self) -> bool:
        try:
            client = await self._get_client()
            return bool(await client.ping())
        except (RedisError, OSError, ValueError) as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        async with self._connection_lock:
            if self.redis_client is not None:
                try:
                    await self.redis_client.aclose()
                    logger.info("Disconnected from Redis")
                except (RedisError, OSError) as e:
                    logger.warning(f"Error during Redis disconnect: {e}")
                finally:
                    self.redis_client = None

    def _redacted_url(self) -> str:
        if "@" not in self.redis_url:
            return self.redis_url
        scheme, _, rest = self.redis_url.partition("://")
        return f"{scheme}://***@{rest.split('@', 1)[1]}"


def create_store() -> KeyValueStore:
    """Build the store selected by ``STORE_BACKEND``."""
    if get_settings().store.backend == StoreBackend.MEMORY:
        logger.warning("Using in-memory phrase store; data will not survive a restart")
        return MemoryStore()
    return RedisStore()


# Global store instance
store: Optional[KeyValueStore] = None


def get_store() -> KeyValueStore:
    """Get or create the process-wide store instance."""
    global store

    if store is None:
        store = create_store()

    return store


async def close_store() -> None:
    """Close the process-wide store."""
    global store

    if store is not None:
        await store.close()
        store = None
