"""
Configuration loader from environment variables and .env files.
"""

import os
from typing import Any, Optional

from pydantic import ValidationError

from ..config import NO_RETRY, ClientConfig, RetryPolicy, RetrySetting
from ..exceptions import ConfigurationError
from ..logging import LoggingConfig
from .validator import ApiClientSettings

PROFILES = ("development", "staging", "production")


def get_env_file_path(profile: Optional[str] = None) -> str:
    """
    .env file for a profile.

    Example:
        >>> get_env_file_path("production")
        '.env.production'
        >>> get_env_file_path(None)  # API_CLIENT_ENV not set
        '.env'
    """
    if profile is None:
        profile = os.getenv("API_CLIENT_ENV")

    if not profile:
        return ".env"

    if profile not in PROFILES:
        raise ConfigurationError(f"Unknown profile: {profile}. Available: {', '.join(PROFILES)}")

    return f".env.{profile}"


def load_from_env(
    profile: Optional[str] = None,
    env_file: Optional[str] = None,
    **overrides: Any
) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides (settings field names, e.g. timeout_ms=5000)
    2. Environment variables (API_CLIENT_*)
    3. .env file (profile-specific or default)
    4. Defaults

    Raises:
        ConfigurationError: Invalid values

    Example:
        >>> config = load_from_env(profile="production", base_url="https://custom.api.com")
    """
    if env_file is None:
        env_file = get_env_file_path(profile)

    try:
        settings = ApiClientSettings(_env_file=env_file, **overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid environment configuration: {e}") from e

    retry: RetrySetting = NO_RETRY
    if settings.retry_enabled:
        retry = RetryPolicy(
            max_retries=settings.retry_max_retries,
            base_delay_ms=settings.retry_base_delay_ms,
            max_delay_ms=settings.retry_max_delay_ms,
            jitter=settings.retry_jitter,
        )

    logging_config = None
    if settings.log_enable_console or settings.log_enable_file:
        logging_config = LoggingConfig.create(
            level=settings.log_level,
            format=settings.log_format,
            enable_console=settings.log_enable_console,
            enable_file=settings.log_enable_file,
            file_path=settings.log_file_path,
        )

    return ClientConfig(
        base_url=settings.base_url,
        timeout_ms=settings.timeout_ms,
        cache_ttl_ms=settings.cache_ttl_ms,
        retry=retry,
        environment=settings.environment,
        logging=logging_config,
    )
