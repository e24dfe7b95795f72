"""Text-line based receipt item extraction."""

import re
from collections.abc import Sequence

from spendscan.domain.receipt import LineItem
from spendscan.runtime.logging import get_logger

from ..item_categories import ItemCategoryRuleLayers, categorize
from ..item_names import normalize_item_name
from .common import CONTACT_INFO_RE, DATE_SHAPE_RE, is_valid_item_amount, parse_amount
from .item_strategies import DEFAULT_ITEM_STRATEGIES, FALLBACK_ITEM_STRATEGY, ItemCandidate, ItemStrategy

logger = get_logger(__name__)

# Summary, payment and footer lines. Whole words only so "Taxi" or "Dates"
# survive as item names.
SKIP_WORDS_RE = re.compile(
    r"\b(?:sub\s*total|total|tax|change|cash|card|date|time|thank|welcome|receipt)\b",
    re.IGNORECASE,
)
SKIP_PATTERNS: tuple[re.Pattern[str], ...] = (
    SKIP_WORDS_RE,
    re.compile(r"^[\d\-\s]+$"),  # just numbers and dashes
    re.compile(r"^[\W_]+$"),  # just symbols
    DATE_SHAPE_RE,
    CONTACT_INFO_RE,
)

MIN_FALLBACK_NAME_LENGTH = 3


def _should_skip_line(line: str) -> bool:
    return any(pattern.search(line) for pattern in SKIP_PATTERNS)


def _build_item(
    candidate: ItemCandidate,
    merchant: str | None,
    rule_layers: ItemCategoryRuleLayers | None,
    min_name_length: int = 1,
) -> LineItem | None:
    """Validate a raw candidate and turn it into a categorized LineItem."""
    amount = parse_amount(candidate.amount_text)
    if not is_valid_item_amount(amount):
        return None
    assert amount is not None

    name = normalize_item_name(candidate.name)
    if len(name) < min_name_length:
        return None

    category = categorize(name, merchant, rule_layers=rule_layers)
    if candidate.quantity > 1:
        name = f"{name} ({candidate.quantity}x)"

    return LineItem(name=name, amount=amount, category=category, quantity=candidate.quantity)


def _extract_line_item(
    line: str,
    strategies: Sequence[ItemStrategy],
    merchant: str | None,
    rule_layers: ItemCategoryRuleLayers | None,
) -> LineItem | None:
    for strategy in strategies:
        candidate = strategy.attempt(line)
        if candidate is None:
            continue
        item = _build_item(candidate, merchant, rule_layers)
        if item is not None:
            logger.debug("Strategy %s extracted %s %s", strategy.name, item.name, item.amount)
            return item
        logger.debug("Strategy %s matched but candidate was rejected", strategy.name)

    candidate = FALLBACK_ITEM_STRATEGY.attempt(line)
    if candidate is None:
        return None
    item = _build_item(candidate, merchant, rule_layers, min_name_length=MIN_FALLBACK_NAME_LENGTH)
    if item is not None:
        logger.debug("Fallback price scan extracted %s %s", item.name, item.amount)
    return item


def _extract_items(
    lines: list[str],
    merchant: str | None = None,
    *,
    strategies: Sequence[ItemStrategy] = DEFAULT_ITEM_STRATEGIES,
    rule_layers: ItemCategoryRuleLayers | None = None,
) -> list[LineItem]:
    """
    Extract line items from receipt lines.

    Each line is consumed at most once: strategies are tried in priority order
    and the first candidate that survives validation wins. Amounts outside the
    item sanity bound are dropped silently.

    Args:
        lines: List of text lines from the receipt
        merchant: Merchant name, used as extra context for categorization
        strategies: Ordered strategies to try before the any-price fallback
        rule_layers: Category keyword layers; built-in keywords when omitted
    """
    items: list[LineItem] = []

    for line in lines:
        line = line.strip()
        if not line or _should_skip_line(line):
            continue

        item = _extract_line_item(line, strategies, merchant, rule_layers)
        if item is not None:
            items.append(item)

    return items
