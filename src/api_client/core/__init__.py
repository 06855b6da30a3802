"""Ядро API клиента: ошибки, retry, кэш, конфигурация."""

from .cache import CacheEntry, CacheStore, generate_cache_key, normalize_endpoint
from .config import (
    NO_RETRY,
    ClientConfig,
    NoRetry,
    RequestOptions,
    RetryPolicy,
    RetrySetting,
)
from .error_handler import ErrorClassifier, handle_api_error, log_api_error, process_response
from .exceptions import ApiClientException, ApiError, ConfigurationError, ErrorCode
from .retry_engine import RetryEngine, compute_delay, default_should_retry, execute_with_retry

__all__ = [
    "CacheEntry",
    "CacheStore",
    "generate_cache_key",
    "normalize_endpoint",
    "NO_RETRY",
    "ClientConfig",
    "NoRetry",
    "RequestOptions",
    "RetryPolicy",
    "RetrySetting",
    "ErrorClassifier",
    "handle_api_error",
    "log_api_error",
    "process_response",
    "ApiClientException",
    "ApiError",
    "ConfigurationError",
    "ErrorCode",
    "RetryEngine",
    "compute_delay",
    "default_should_retry",
    "execute_with_retry",
]
