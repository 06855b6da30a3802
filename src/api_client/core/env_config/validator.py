"""
Pydantic settings for environment configuration.
"""

from typing import Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiClientSettings(BaseSettings):
    """
    API client configuration from environment variables.

    Reads from:
    1. Environment variables (API_CLIENT_*)
    2. .env file
    3. Defaults

    Example .env file:
        API_CLIENT_BASE_URL=https://directory.example.com/api
        API_CLIENT_ENVIRONMENT=production
        API_CLIENT_TIMEOUT_MS=10000
        API_CLIENT_RETRY_MAX_RETRIES=5
        API_CLIENT_LOG_ENABLE_CONSOLE=true
        API_CLIENT_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix='API_CLIENT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_url: str = Field(default="http://localhost:5000/api", min_length=1)
    environment: Literal["development", "staging", "production"] = Field(default="development")

    timeout_ms: int = Field(default=30_000, gt=0, description="Per-attempt timeout")
    cache_ttl_ms: int = Field(default=5 * 60 * 1000, gt=0, description="Cache entry lifetime")

    # Retry
    retry_enabled: bool = Field(default=True)
    retry_max_retries: int = Field(default=3, ge=0, le=10)
    retry_base_delay_ms: int = Field(default=300, ge=0)
    retry_max_delay_ms: int = Field(default=10_000, ge=0)
    retry_jitter: bool = Field(default=True)

    # Logging (None unless console or file output is enabled)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="text")
    log_enable_console: bool = Field(default=False)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = None

    @model_validator(mode="after")
    def check_consistency(self) -> "ApiClientSettings":
        """Cross-field checks."""
        if self.retry_max_delay_ms < self.retry_base_delay_ms:
            raise ValueError(
                f"retry_max_delay_ms ({self.retry_max_delay_ms}) must be >= "
                f"retry_base_delay_ms ({self.retry_base_delay_ms})"
            )
        if self.log_enable_file and not self.log_file_path:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return self
