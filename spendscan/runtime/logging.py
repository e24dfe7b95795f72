"""Centralized logging configuration for spendscan.

Usage:
    from spendscan.runtime import get_logger
    logger = get_logger(__name__)

    logger.debug("Strategy matched")
    logger.info("Parsed receipt")
    logger.warning("OCR service slow")
    logger.error("Could not load expenses")

Environment variables:
    SPENDSCAN_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
"""

import logging
import os
import sys

LOGGER_NAMESPACE = "spendscan"
LOG_LEVEL_ENV = "SPENDSCAN_LOG_LEVEL"

DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_logging_configured = False


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None) -> None:
    """Configure the ``spendscan`` logger namespace.

    Args:
        level: Log level to use. If None, reads from SPENDSCAN_LOG_LEVEL env var
               or uses DEFAULT_LOG_LEVEL.
    """
    global _logging_configured

    if _logging_configured:
        return

    if level is None:
        level = _LEVEL_MAP.get(os.environ.get(LOG_LEVEL_ENV, "").upper(), DEFAULT_LOG_LEVEL)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter_for(level))

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    root_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Module names already inside the package (``spendscan.receipt...``) are used
    as-is; anything else is nested under the ``spendscan`` namespace.
    """
    configure_logging()

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int) -> None:
    """Change the log level at runtime.

    Args:
        level: New log level (e.g., logging.DEBUG)
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    for handler in logger.handlers:
        handler.setFormatter(_formatter_for(level))
