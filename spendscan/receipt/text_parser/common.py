"""Shared constants and helpers for receipt text parsing."""

import re
from decimal import Decimal, InvalidOperation

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

# Item amounts must satisfy MIN < amount < MAX (currency units)
MIN_ITEM_AMOUNT = Decimal("0")
MAX_ITEM_AMOUNT = Decimal("10000")

UNKNOWN_MERCHANT = "Unknown Merchant"

# Two-place decimal amount only: "2.50", "1,299.00"
DECIMAL_AMOUNT = r"(?:\d{1,3}(?:,\d{3})+|\d+)\.\d{2}"

CURRENCY_AMOUNT_RE = re.compile(r"\$?\s?" + DECIMAL_AMOUNT)
TRAILING_AMOUNT_RE = re.compile(r"\$?\s?" + DECIMAL_AMOUNT + r"\s*$")
DATE_SHAPE_RE = re.compile(r"\b\d{1,4}[/.\-]\d{1,2}[/.\-]\d{2,4}\b")
CONTACT_INFO_RE = re.compile(r"tel:|phone|fax|www\.|https?://|\.com\b|address", re.IGNORECASE)


def split_lines(text: str | None) -> list[str]:
    """Split text into stripped, non-empty lines."""
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def parse_amount(token: str | None) -> Decimal | None:
    """Parse an amount token like "$1,299.00" into a 2-place Decimal."""
    if not token:
        return None
    cleaned = token.replace("$", "").replace(",", "").strip()
    if not cleaned:
        return None
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount.quantize(CENTS)


def is_valid_item_amount(amount: Decimal | None) -> bool:
    """Return True if amount is inside the item sanity bound."""
    return amount is not None and MIN_ITEM_AMOUNT < amount < MAX_ITEM_AMOUNT


def looks_like_date(text: str) -> bool:
    return DATE_SHAPE_RE.search(text) is not None
