"""Parse raw OCR'd receipt text into a ReceiptParseResult."""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from spendscan.domain.categories import Category
from spendscan.domain.receipt import Confidence, LineItem, ReceiptParseResult
from spendscan.runtime.logging import get_logger

from .date_utils import DEFAULT_YEAR_WINDOW
from .item_categories import ItemCategoryRuleLayers
from .text_parser import (
    DEFAULT_ITEM_STRATEGIES,
    ItemStrategy,
    _extract_date,
    _extract_fallback_total,
    _extract_items,
    _extract_merchant,
    split_lines,
)
from .text_parser.common import ZERO

logger = get_logger(__name__)

FALLBACK_ITEM_NAME = "Store Purchase"
FALLBACK_ITEM_AMOUNT = Decimal("0.01")


def fallback_item() -> LineItem:
    """Placeholder emitted when neither items nor a total were found."""
    return LineItem(
        name=FALLBACK_ITEM_NAME,
        amount=FALLBACK_ITEM_AMOUNT,
        category=Category.OTHER,
        placeholder=True,
    )


def assign_confidence(items: Sequence[LineItem], total: Decimal) -> Confidence:
    """high: real items found; medium: only a total; low: nothing usable."""
    if any(not item.placeholder for item in items):
        return Confidence.HIGH
    if total > 0:
        return Confidence.MEDIUM
    return Confidence.LOW


def parse_receipt(
    raw_text: str | None,
    *,
    today: date | None = None,
    year_window: tuple[int, int] = DEFAULT_YEAR_WINDOW,
    rule_layers: ItemCategoryRuleLayers | None = None,
    strategies: Sequence[ItemStrategy] = DEFAULT_ITEM_STRATEGIES,
) -> ReceiptParseResult:
    """
    Parse receipt text into structured expense data.

    This is a best-effort parser: it never raises for odd input and reports
    quality through ``confidence``/``success`` instead.

    Args:
        raw_text: Text produced by an OCR service. None is treated as empty.
        today: Reference date for relative words and fallbacks (default: date.today())
        year_window: Inclusive (min, max) year range a receipt date must fall in
        rule_layers: Category keyword layers; built-in keywords when omitted
        strategies: Item strategies tried in order before the any-price fallback

    Returns:
        ReceiptParseResult. ``total`` is the item sum when items were found,
        otherwise the explicit total in the text (or zero).
    """
    full_text = raw_text or ""
    lines = split_lines(full_text)

    receipt_date = _extract_date(full_text, today=today, year_window=year_window)
    merchant = _extract_merchant(lines)
    items = _extract_items(lines, merchant, strategies=strategies, rule_layers=rule_layers)

    if items:
        total = sum((item.amount for item in items), ZERO)
    else:
        total = _extract_fallback_total(full_text)
        if total <= 0:
            total = ZERO
            items = [fallback_item()]

    confidence = assign_confidence(items, total)
    logger.debug(
        "Parsed receipt: merchant=%s date=%s items=%d total=%s confidence=%s",
        merchant,
        receipt_date,
        len(items),
        total,
        confidence.value,
    )

    return ReceiptParseResult(
        date=receipt_date,
        merchant=merchant,
        total=total,
        success=confidence is not Confidence.LOW,
        confidence=confidence,
        items=tuple(items),
        raw_text=full_text,
    )
