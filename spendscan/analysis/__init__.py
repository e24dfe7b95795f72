"""Spending analysis over expense history."""

from spendscan.analysis.report import format_wastage_report
from spendscan.analysis.wastage import (
    detect_frequent_small_expenses,
    detect_named_patterns,
    detect_wastage,
    format_currency,
)
from spendscan.analysis.wastage_patterns import WASTAGE_PATTERNS, WastagePattern, tokenize_description

__all__ = [
    "WASTAGE_PATTERNS",
    "WastagePattern",
    "detect_frequent_small_expenses",
    "detect_named_patterns",
    "detect_wastage",
    "format_currency",
    "format_wastage_report",
    "tokenize_description",
]
