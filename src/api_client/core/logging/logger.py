"""
Handler setup for the `api_client` logger hierarchy.

Library modules log through `logging.getLogger(__name__)`; this module only
decides where those records go.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .config import LoggingConfig
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .formatters import get_formatter

LOGGER_NAME = "api_client"

# Handlers installed by configure_logging (removed by reset_logging)
_installed_handlers: List[logging.Handler] = []


def _create_console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _create_file_handler(config: LoggingConfig, level: int, formatter: logging.Formatter) -> logging.Handler:
    """
    Rotating file handler.

    File rotation:
        app.log       <- current
        app.log.1     <- previous
        ...
    """
    log_dir = Path(config.file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=config.file_path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger inside the `api_client` hierarchy.

    Example:
        >>> get_logger("services").name
        'api_client.services'
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Install console/file handlers on the `api_client` logger.

    Calling it again replaces the handlers from the previous call.
    Records stop propagating to the root logger while handlers are installed.

    Example:
        >>> logger = configure_logging(LoggingConfig.create(level="DEBUG", format="json"))
        >>> logger.info("Logger configured")
    """
    config = config or LoggingConfig()
    reset_logging()

    logger = logging.getLogger(LOGGER_NAME)
    level = getattr(logging, config.level.value)
    logger.setLevel(level)

    filters: List[logging.Filter] = []
    if config.enable_correlation_id:
        filters.append(CorrelationIdFilter())
    if config.extra_fields:
        filters.append(ExtraFieldsFilter(config.extra_fields))

    formatter = get_formatter(config.format.value)

    handlers: List[logging.Handler] = []
    if config.enable_console:
        handlers.append(_create_console_handler(level, formatter))
    if config.enable_file and config.file_path:
        handlers.append(_create_file_handler(config, level, formatter))

    for handler in handlers:
        for f in filters:
            handler.addFilter(f)
        logger.addHandler(handler)
        _installed_handlers.append(handler)

    if handlers:
        logger.propagate = False

    return logger


def reset_logging() -> None:
    """
    Remove handlers installed by configure_logging and restore propagation.

    Idempotent.
    """
    logger = logging.getLogger(LOGGER_NAME)

    while _installed_handlers:
        handler = _installed_handlers.pop()
        logger.removeHandler(handler)
        handler.flush()
        handler.close()

    logger.setLevel(logging.NOTSET)
    logger.propagate = True
