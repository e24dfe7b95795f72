"""Runtime infrastructure for spendscan.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Environment-backed configuration via get_settings(), Settings
- Category rule loading via load_item_category_rule_layers()
- Upload deduplication via ProcessingCache

Usage:
    from spendscan.runtime import get_logger, get_settings

    logger = get_logger(__name__)
    settings = get_settings()
    print(settings.ocr_url, settings.year_window)
"""

from spendscan.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from spendscan.runtime.settings import Settings, get_settings
from spendscan.runtime.processing_cache import ProcessingCache, file_fingerprint
from spendscan.runtime.item_category_rules import load_item_category_rule_layers

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Settings
    "Settings",
    "get_settings",
    # Rules
    "load_item_category_rule_layers",
    # Upload cache
    "ProcessingCache",
    "file_fingerprint",
]
