"""Core domain models for spendscan.

This module provides the core data models used throughout the project:
- Category: the unified expense category taxonomy
- LineItem, ReceiptParseResult, Confidence: receipt parsing models
- Expense, WastageAlert, Severity: expense history analysis models

Usage:
    from spendscan.domain import Category, ReceiptParseResult, WastageAlert
"""

from spendscan.domain.categories import LEGACY_CATEGORY_ALIASES, Category, resolve_category
from spendscan.domain.expense import Expense, Severity, WastageAlert
from spendscan.domain.receipt import Confidence, LineItem, ReceiptParseResult

__all__ = [
    "Category",
    "LEGACY_CATEGORY_ALIASES",
    "resolve_category",
    "Confidence",
    "LineItem",
    "ReceiptParseResult",
    "Expense",
    "Severity",
    "WastageAlert",
]
