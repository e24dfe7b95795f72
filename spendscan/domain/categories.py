"""Unified expense category taxonomy.

Receipt items, chat-entered expenses and wastage patterns all share this one
enumeration. Older category names from the chat-expense flow are accepted
through ``LEGACY_CATEGORY_ALIASES``.
"""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """Expense category. Declaration order is also the scoring tie-break order."""

    GROCERIES = "Groceries"
    DINING = "Dining"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    OTHER = "Other"


# Chat-expense taxonomy -> unified taxonomy
LEGACY_CATEGORY_ALIASES: dict[str, Category] = {
    "food": Category.DINING,
    "transportation": Category.TRANSPORT,
    "healthcare": Category.HEALTH,
    "rent": Category.UTILITIES,
    "grocery": Category.GROCERIES,
}


def resolve_category(name: str | Category | None, default: Category | None = Category.OTHER) -> Category | None:
    """Resolve a category name (current or legacy, any case) to a Category."""
    if isinstance(name, Category):
        return name
    if not name:
        return default

    key = str(name).strip().lower()
    for category in Category:
        if category.value.lower() == key:
            return category
    return LEGACY_CATEGORY_ALIASES.get(key, default)
