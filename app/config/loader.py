"""
Configuration loader utility for environment-specific settings.
"""

import logging
from pathlib import Path
from typing import Optional
import os

from .settings import Settings, Environment

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Load configuration for the specified environment.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            Settings instance with environment-specific configuration
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env = Environment(environment.lower())
        env_file_path = Path(f".env.{env.value}")

        if env_file_path.exists():
            return Settings(_env_file=str(env_file_path), environment=env)

        logger.warning(f"Environment file {env_file_path} not found, using default settings")
        return Settings(environment=env)

    @staticmethod
    def export_environment(environment: str) -> Optional[str]:
        """
        Point settings created later in this process, and in uvicorn workers
        it spawns, at the environment's .env file.

        Returns:
            Absolute path of the env file, or None if it does not exist
        """
        env = Environment(environment.lower())
        os.environ["ENVIRONMENT"] = env.value

        env_file_path = Path(f".env.{env.value}")
        if not env_file_path.exists():
            return None

        env_file = str(env_file_path.resolve())
        os.environ["ENV_FILE"] = env_file
        return env_file

    @staticmethod
    def get_available_environments() -> list[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(".").glob(".env.*"):
            if env_file.name.endswith(".sample"):
                continue
            env_files.append(env_file.name.replace(".env.", "", 1))
        return sorted(env_files)

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Create a sample .env file for the specified environment.

        Args:
            environment: Target environment
            output_path: Optional custom output path

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())

        if output_path is None:
            output_path = f".env.{env.value}.sample"

        defaults = Settings()

        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

# Application Configuration
ENVIRONMENT={env.value}
DEBUG={'true' if env == Environment.DEVELOPMENT else 'false'}

# Server Configuration
HOST={defaults.host}
PORT={defaults.port}
WORKERS={1 if env == Environment.DEVELOPMENT else 4}

# Logging Configuration
LOG_LEVEL={defaults.log_level.value}
LOG_FORMAT={defaults.log_format}

# Remote Store Configuration
STORE_BACKEND={'memory' if env == Environment.DEVELOPMENT else 'redis'}
REDIS_URL={defaults.redis.url}

# Rate Limiting
RATE_LIMIT_PHRASES_MAX_REQUESTS={defaults.rate_limit.phrases_max_requests}
RATE_LIMIT_PHRASES_WINDOW_SECONDS={defaults.rate_limit.phrases_window_seconds}
RATE_LIMIT_TRANSLATE_MAX_REQUESTS={defaults.rate_limit.translate_max_requests}
RATE_LIMIT_TRANSLATE_WINDOW_SECONDS={defaults.rate_limit.translate_window_seconds}

# Sync Limits
SYNC_MAX_PHRASES={defaults.sync.max_phrases}

# Translation
ANTHROPIC_API_KEY=your-api-key-here
TRANSLATION_MODEL={defaults.translation.model}

# Security Configuration
SECURITY_CORS_ORIGINS=*
"""

        with open(output_path, "w") as f:
            f.write(sample_content)

        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
