"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for different deployment environments.
"""

import os
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Dict, Any, List
from enum import Enum


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StoreBackend(str, Enum):
    """Remote store implementations"""
    REDIS = "redis"
    MEMORY = "memory"


class RedisSettings(BaseSettings):
    """Redis store configuration"""

    # REDIS_URL wins over the discrete host/port fields when set
    url_override: Optional[str] = Field(default=None, alias="REDIS_URL")
    host: str = Field(default="localhost")
    port: int = Field(default=6379, ge=1, le=65535)
    password: Optional[str] = Field(default=None)
    db: int = Field(default=0, ge=0, le=15)
    socket_timeout: int = Field(default=5, ge=1, le=30)

    @property
    def url(self) -> str:
        """Generate Redis URL from configuration"""
        if self.url_override:
            return self.url_override
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"

    model_config = {"env_prefix": "REDIS_", "populate_by_name": True, "extra": "ignore"}


class StoreSettings(BaseSettings):
    """Remote store selection"""

    backend: StoreBackend = Field(default=StoreBackend.REDIS)
    key_prefix: str = Field(default="phrases:")

    model_config = {"env_prefix": "STORE_", "extra": "ignore"}


class RateLimitSettings(BaseSettings):
    """Per-client fixed window limits for the public endpoints"""

    phrases_max_requests: int = Field(default=60, ge=1, le=10000)
    phrases_window_seconds: int = Field(default=60, ge=1, le=3600)
    translate_max_requests: int = Field(default=20, ge=1, le=10000)
    translate_window_seconds: int = Field(default=60, ge=1, le=3600)
    cleanup_interval_seconds: int = Field(default=300, ge=10, le=3600)

    model_config = {"env_prefix": "RATE_LIMIT_", "extra": "ignore"}


class SyncSettings(BaseSettings):
    """Phrase collection limits"""

    max_phrases: int = Field(default=10000, ge=1)
    max_text_length: int = Field(default=500, ge=1)

    model_config = {"env_prefix": "SYNC_", "extra": "ignore"}


class TranslationSettings(BaseSettings):
    """Language model backed translation configuration"""

    api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")
    api_url: str = Field(default="https://api.anthropic.com/v1/messages")
    api_version: str = Field(default="2023-06-01")
    model: str = Field(default="claude-sonnet-4-5-20250929")
    max_tokens: int = Field(default=256, ge=16, le=4096)
    timeout_seconds: int = Field(default=30, ge=1, le=300)

    model_config = {"env_prefix": "TRANSLATION_", "populate_by_name": True, "extra": "ignore"}


class SecuritySettings(BaseSettings):
    """CORS configuration"""

    # Comma separated, e.g. "*" or "https://a.example,https://b.example"
    cors_origins: str = Field(default="*")
    cors_allow_credentials: bool = Field(default=False)
    cors_allow_methods: str = Field(default="GET,POST")
    cors_allow_headers: str = Field(default="*")

    model_config = {"env_prefix": "SECURITY_", "extra": "ignore"}


def split_csv(value: str, default: str = "*") -> List[str]:
    """Split a comma separated setting, falling back to ``default`` when blank"""
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or [default]


def resolve_env_file(env_file: Optional[str] = None) -> str:
    """Env file for this process: explicit argument, then ENV_FILE, then .env"""
    return env_file or os.getenv("ENV_FILE") or ".env"


class SyncClientSettings(BaseSettings):
    """Configuration for the device-side sync coordinator"""

    base_url: str = Field(default="http://localhost:8000")
    cache_path: str = Field(default="~/.viet-phrases/local-storage.json")
    cache_quota_bytes: int = Field(default=5 * 1024 * 1024, ge=1024)
    debounce_seconds: float = Field(default=1.0, ge=0.0, le=60.0)
    timeout_seconds: float = Field(default=10.0, ge=1.0, le=120.0)

    model_config = {"env_prefix": "SYNC_CLIENT_", "extra": "ignore"}


NESTED_GROUPS = {
    "redis": RedisSettings,
    "store": StoreSettings,
    "rate_limit": RateLimitSettings,
    "sync": SyncSettings,
    "translation": TranslationSettings,
    "security": SecuritySettings,
}


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="Vietnamese Phrase Sync")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)
    workers: int = Field(default=1, ge=1, le=16)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="json")

    # Nested Settings
    redis: RedisSettings = Field(default_factory=RedisSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)
    translation: TranslationSettings = Field(default_factory=TranslationSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    def __init__(self, _env_file: Optional[str] = None, **values: Any):
        # Nested groups read the same env file as the top level settings
        env_file = resolve_env_file(_env_file)
        for name, group in NESTED_GROUPS.items():
            if name not in values:
                values[name] = group(_env_file=env_file)
        super().__init__(_env_file=env_file, **values)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": split_csv(self.security.cors_origins),
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": split_csv(self.security.cors_allow_methods, default="GET"),
            "allow_headers": split_csv(self.security.cors_allow_headers),
        }

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings
