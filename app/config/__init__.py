"""
Configuration package for the Vietnamese Phrase Sync service.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    StoreBackend,
    RedisSettings,
    StoreSettings,
    RateLimitSettings,
    SyncSettings,
    TranslationSettings,
    SecuritySettings,
    SyncClientSettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "StoreBackend",
    "RedisSettings",
    "StoreSettings",
    "RateLimitSettings",
    "SyncSettings",
    "TranslationSettings",
    "SecuritySettings",
    "SyncClientSettings",
    "settings",
    "get_settings",
    "reload_settings",
]
