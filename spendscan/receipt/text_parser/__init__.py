"""Composable receipt text parser components."""

from .common import split_lines
from .fields_parser import _extract_date, _extract_fallback_total, _extract_merchant
from .item_strategies import (
    DEFAULT_ITEM_STRATEGIES,
    FALLBACK_ITEM_STRATEGY,
    ItemCandidate,
    ItemStrategy,
    PriceFirstStrategy,
    QuantityPrefixedStrategy,
    SkuPrefixedStrategy,
    TrailingPriceStrategy,
)
from .items_text_parser import _extract_items

__all__ = [
    "DEFAULT_ITEM_STRATEGIES",
    "FALLBACK_ITEM_STRATEGY",
    "ItemCandidate",
    "ItemStrategy",
    "PriceFirstStrategy",
    "QuantityPrefixedStrategy",
    "SkuPrefixedStrategy",
    "TrailingPriceStrategy",
    "_extract_date",
    "_extract_fallback_total",
    "_extract_items",
    "_extract_merchant",
    "split_lines",
]
