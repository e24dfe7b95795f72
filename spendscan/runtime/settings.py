"""Runtime settings for spendscan.

Every knob has a default and can be overridden from the environment:

    SPENDSCAN_DATE_YEAR_MIN / SPENDSCAN_DATE_YEAR_MAX  receipt date sanity window
    SPENDSCAN_CATEGORY_RULES                          extra item-category TOML file
    SPENDSCAN_OCR_URL                                 external OCR service base URL
    SPENDSCAN_CURRENCY_SYMBOL                         symbol used in savings suggestions
    SPENDSCAN_SMALL_EXPENSE_THRESHOLD                 upper bound for "small" expenses
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path

from spendscan.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_OCR_URL = "http://localhost:8001"


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", key, raw)
        return default


def _env_decimal(env: Mapping[str, str], key: str, default: Decimal) -> Decimal:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation:
        logger.warning("Ignoring non-numeric %s=%r", key, raw)
        return default
    if not value.is_finite():
        logger.warning("Ignoring non-finite %s=%r", key, raw)
        return default
    return value


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once from the environment."""

    date_year_min: int = 2020
    date_year_max: int = 2030
    category_rules_path: Path | None = None
    ocr_url: str = DEFAULT_OCR_URL
    currency_symbol: str = "₹"
    small_expense_threshold: Decimal = Decimal("200")

    @property
    def year_window(self) -> tuple[int, int]:
        return (self.date_year_min, self.date_year_max)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if env is None else env
        rules = env.get("SPENDSCAN_CATEGORY_RULES", "").strip()
        return cls(
            date_year_min=_env_int(env, "SPENDSCAN_DATE_YEAR_MIN", cls.date_year_min),
            date_year_max=_env_int(env, "SPENDSCAN_DATE_YEAR_MAX", cls.date_year_max),
            category_rules_path=Path(rules).expanduser() if rules else None,
            ocr_url=env.get("SPENDSCAN_OCR_URL", "").strip() or DEFAULT_OCR_URL,
            currency_symbol=env.get("SPENDSCAN_CURRENCY_SYMBOL", "").strip() or cls.currency_symbol,
            small_expense_threshold=_env_decimal(
                env, "SPENDSCAN_SMALL_EXPENSE_THRESHOLD", cls.small_expense_threshold
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the global Settings instance (cached)."""
    return Settings.from_env()
