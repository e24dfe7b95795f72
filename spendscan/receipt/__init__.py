"""Receipt text parsing: OCR'd text in, categorized expense data out."""

from spendscan.receipt.item_categories import categorize
from spendscan.receipt.item_names import normalize_item_name
from spendscan.receipt.text_result_parser import assign_confidence, fallback_item, parse_receipt

__all__ = [
    "assign_confidence",
    "categorize",
    "fallback_item",
    "normalize_item_name",
    "parse_receipt",
]
