"""
Device-side sync: local cache, sync key generation and the coordinator.
"""

from typing import Optional

from app.config.settings import SyncClientSettings, resolve_env_file

from .coordinator import AddPhraseResult, InvalidSyncKeyError, SyncCoordinator
from .local_cache import LocalCache, LocalCacheError, QuotaExceededError
from .sync_api import PhraseSyncClient, SyncRequestError
from .sync_key import generate_sync_key


def create_coordinator(config: Optional[SyncClientSettings] = None) -> SyncCoordinator:
    """Build a coordinator wired from ``SYNC_CLIENT_*`` settings."""
    config = config or SyncClientSettings(_env_file=resolve_env_file())
    return SyncCoordinator(
        api=PhraseSyncClient(config.base_url, timeout=config.timeout_seconds),
        cache=LocalCache(config.cache_path, quota_bytes=config.cache_quota_bytes),
        debounce_seconds=config.debounce_seconds,
    )


__all__ = [
    "AddPhraseResult",
    "InvalidSyncKeyError",
    "SyncCoordinator",
    "LocalCache",
    "LocalCacheError",
    "QuotaExceededError",
    "PhraseSyncClient",
    "SyncRequestError",
    "generate_sync_key",
    "create_coordinator",
]
