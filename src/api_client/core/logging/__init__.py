"""
Logging for the API client.

Example:
    >>> from api_client.core.logging import LoggingConfig, configure_logging
    >>>
    >>> configure_logging(LoggingConfig.create(level="DEBUG", format="json"))
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import get_logger, configure_logging, reset_logging
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "get_logger",
    "configure_logging",
    "reset_logging",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    # Filters
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
]
