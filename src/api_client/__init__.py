"""API Client Core - async API client with retry, caching and typed errors."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .client import RequestClient
from .auth import BearerTokenAuth
from .core.config import (
    ClientConfig,
    RequestOptions,
    RetryPolicy,
    NoRetry,
    NO_RETRY,
)
from .core.exceptions import (
    ApiClientException,
    ConfigurationError,
    ApiError,
    ErrorCode,
    NetworkError,
    TimeoutError,
    ServerError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    InvalidParamsError,
)
from .core.error_handler import ErrorClassifier, handle_api_error, log_api_error
from .core.retry_engine import RetryEngine, compute_delay, execute_with_retry
from .core.cache import CacheStore, generate_cache_key
from .core.env_config import load_from_env, ConfigFileLoader
from .core.logging import LoggingConfig, configure_logging
from .services import (
    ResourcesService,
    TeachersService,
    TraditionsService,
    create_services,
)

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('api_client')
logging.getLogger('api_client').addHandler(logging.NullHandler())

try:
    __version__ = version("api-client-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Client
    "RequestClient",
    "BearerTokenAuth",
    # Config
    "ClientConfig",
    "RequestOptions",
    "RetryPolicy",
    "NoRetry",
    "NO_RETRY",
    "load_from_env",
    "ConfigFileLoader",
    "LoggingConfig",
    "configure_logging",
    # Exceptions
    "ApiClientException",
    "ConfigurationError",
    "ApiError",
    "ErrorCode",
    "NetworkError",
    "TimeoutError",
    "ServerError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ValidationError",
    "InvalidParamsError",
    # Building blocks
    "ErrorClassifier",
    "handle_api_error",
    "log_api_error",
    "RetryEngine",
    "compute_delay",
    "execute_with_retry",
    "CacheStore",
    "generate_cache_key",
    # Services
    "ResourcesService",
    "TeachersService",
    "TraditionsService",
    "create_services",
]
