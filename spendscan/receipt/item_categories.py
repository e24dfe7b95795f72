"""Item categorization rules for receipt line items.

This module maps item descriptions (plus the merchant name, when known) to an
expense Category using keyword scoring:

    score(category) = sum(len(keyword) * occurrences(keyword))

The highest nonzero score wins. Ties go to the category declared first in
``Category``. No match means ``Category.OTHER``.

Keywords of 3 characters or fewer only count as whole words, so TEA does not
match inside STEAK.

To add new rules:
1. Add keywords to the matching tuple below, or
2. Ship a TOML layer (see ``spendscan.runtime.item_category_rules``)

General-merchandise retailers (Walmart, Costco, Target, Amazon) are not
keywords: they sell across every category and would drown out the item text.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from spendscan.domain.categories import Category, resolve_category

SHORT_KEYWORD_MAX_LENGTH = 3

DEFAULT_CATEGORY_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.GROCERIES: (
        "milk",
        "bread",
        "eggs",
        "cheese",
        "butter",
        "yogurt",
        "meat",
        "chicken",
        "beef",
        "fish",
        "apple",
        "banana",
        "orange",
        "tomato",
        "lettuce",
        "onion",
        "potato",
        "carrot",
        "rice",
        "pasta",
        "cereal",
        "flour",
        "sugar",
        "salt",
        "oil",
        "supermarket",
        "grocery",
        "produce",
        "dairy",
        "vegetable",
        "fruit",
        "organic",
        "fresh",
        "frozen",
    ),
    Category.DINING: (
        "burger",
        "pizza",
        "coffee",
        "tea",
        "sandwich",
        "salad",
        "soup",
        "pasta",
        "sushi",
        "restaurant",
        "cafe",
        "meal",
        "lunch",
        "dinner",
        "breakfast",
        "drink",
        "beverage",
        "takeout",
        "delivery",
        "fast food",
        "dine",
        "bar",
        "pub",
        "bistro",
    ),
    Category.TRANSPORT: (
        "uber",
        "lyft",
        "taxi",
        "gas",
        "gasoline",
        "fuel",
        "bus",
        "train",
        "subway",
        "metro",
        "fare",
        "parking",
        "toll",
        "transport",
        "ride",
        "trip",
        "station",
        "airport",
    ),
    Category.SHOPPING: (
        "clothing",
        "shirt",
        "pants",
        "shoes",
        "dress",
        "jacket",
        "electronics",
        "phone",
        "computer",
        "tablet",
        "headphones",
        "store",
        "shop",
        "retail",
        "mall",
        "department",
        "purchase",
        "buy",
    ),
    Category.HEALTH: (
        "doctor",
        "medicine",
        "pharmacy",
        "prescription",
        "medical",
        "health",
        "hospital",
        "clinic",
        "vitamin",
        "supplement",
        "drug",
        "pills",
        "treatment",
        "therapy",
    ),
    Category.ENTERTAINMENT: (
        "movie",
        "theater",
        "cinema",
        "ticket",
        "event",
        "concert",
        "show",
        "game",
        "gaming",
        "entertainment",
        "netflix",
        "spotify",
        "music",
        "streaming",
        "subscription",
    ),
    Category.UTILITIES: (
        "electricity",
        "electric",
        "water",
        "gas",
        "utility",
        "bill",
        "phone",
        "internet",
        "cable",
        "service",
        "payment",
        "monthly",
        "annual",
    ),
}


RuleEntry = tuple[Category, tuple[str, ...]]


@dataclass(frozen=True)
class ItemCategoryRuleLayers:
    """In-memory keyword rules, one entry per category in declaration order."""

    rules: tuple[RuleEntry, ...]


def _normalize_keywords(raw: Any) -> tuple[str, ...]:
    """Normalize keywords value from TOML into a lowercased tuple."""
    if isinstance(raw, str):
        value = raw.strip().lower()
        return (value,) if value else tuple()
    if isinstance(raw, list):
        return tuple(str(v).strip().lower() for v in raw if str(v).strip())
    return tuple()


def build_item_category_rule_layers(
    classifier_configs: Sequence[Mapping[str, Any]] | None = None,
) -> ItemCategoryRuleLayers:
    """Merge built-in keywords with keyword layers loaded from config.

    Each config looks like ``{"rules": [{"category": "Groceries", "keywords": [...]}]}``.
    Category names go through ``resolve_category`` so legacy names such as
    ``Food`` are accepted; unknown names are ignored.
    """
    merged: dict[Category, list[str]] = {
        category: list(DEFAULT_CATEGORY_KEYWORDS.get(category, ())) for category in Category
    }

    for config in classifier_configs or ():
        for rule in config.get("rules", []):
            if not isinstance(rule, Mapping):
                continue
            category = resolve_category(str(rule.get("category") or ""), default=None)
            if category is None:
                continue
            for keyword in _normalize_keywords(rule.get("keywords")):
                if keyword not in merged[category]:
                    merged[category].append(keyword)

    return ItemCategoryRuleLayers(
        rules=tuple((category, tuple(keywords)) for category, keywords in merged.items() if keywords)
    )


@lru_cache(maxsize=1)
def _get_default_rule_layers() -> ItemCategoryRuleLayers:
    """Built-in-only default rules (no file I/O, no runtime deps)."""
    return build_item_category_rule_layers()


@lru_cache(maxsize=512)
def _short_keyword_regex(keyword: str) -> re.Pattern[str]:
    return re.compile(r"\b" + re.escape(keyword) + r"\b")


def _count_occurrences(keyword: str, text: str) -> int:
    if len(keyword.replace(" ", "")) <= SHORT_KEYWORD_MAX_LENGTH:
        return len(_short_keyword_regex(keyword).findall(text))
    return text.count(keyword)


def score_categories(text: str, rule_layers: ItemCategoryRuleLayers | None = None) -> dict[Category, int]:
    """Score every category with at least one keyword hit."""
    layers = rule_layers or _get_default_rule_layers()
    lowered = text.lower()

    scores: dict[Category, int] = {}
    for category, keywords in layers.rules:
        score = sum(len(keyword) * _count_occurrences(keyword, lowered) for keyword in keywords)
        if score > 0:
            scores[category] = score
    return scores


def categorize(
    item_text: str,
    merchant_text: str | None = None,
    rule_layers: ItemCategoryRuleLayers | None = None,
) -> Category:
    """
    Return the expense category for an item.

    Args:
        item_text: Item description (e.g., "Whole Milk")
        merchant_text: Optional merchant name, scored together with the item
        rule_layers: Preloaded keyword layers (typically from the runtime loader).
            Built-in keywords apply when omitted.

    Returns:
        Best-scoring Category, or Category.OTHER when no keyword matches
    """
    combined = f"{item_text} {merchant_text or ''}"
    scores = score_categories(combined, rule_layers)
    if not scores:
        return Category.OTHER

    best_category = Category.OTHER
    best_score = 0
    # Category declaration order decides ties
    for category in Category:
        score = scores.get(category, 0)
        if score > best_score:
            best_category, best_score = category, score
    return best_category


def categorize_debug(
    item_text: str,
    merchant_text: str | None = None,
    rule_layers: ItemCategoryRuleLayers | None = None,
) -> list[tuple[Category, int]]:
    """Debug version that returns every scoring category, best first.

    Useful for understanding why a particular category was chosen.
    """
    scores = score_categories(f"{item_text} {merchant_text or ''}", rule_layers)
    order = {category: index for index, category in enumerate(Category)}
    return sorted(scores.items(), key=lambda entry: (-entry[1], order[entry[0]]))
