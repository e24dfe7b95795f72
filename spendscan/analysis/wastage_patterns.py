"""Built-in wastage patterns: recurring discretionary spending worth flagging."""

import re
from dataclasses import dataclass
from typing import Literal

from spendscan.domain.categories import Category

Priority = Literal["low", "medium", "high"]

# Non-word characters become spaces; Devanagari marks are kept so Hindi
# descriptions tokenize into whole words.
_NON_WORD_RE = re.compile(r"[^\w\s\u0900-\u097F]")
_WHITESPACE_RE = re.compile(r"\s+")

MIN_TOKEN_LENGTH = 2
# A token must be at least this long to match as a fragment of a longer keyword
# ("flake" in "gold flake"); shorter ones ("in", "day") are too ambiguous.
MIN_REVERSE_MATCH_LENGTH = 4


@dataclass(frozen=True)
class WastagePattern:
    key: str
    keywords: tuple[str, ...]
    category: Category
    priority: Priority
    title: str
    description: str
    suggestion: str

    def matches(self, description: str) -> bool:
        return matches_keywords(tokenize_description(description), self.keywords)


def tokenize_description(text: str) -> list[str]:
    """Lowercased words plus adjacent word pairs, each at least 2 characters."""
    clean = _WHITESPACE_RE.sub(" ", _NON_WORD_RE.sub(" ", text.lower())).strip()
    if not clean:
        return []
    words = clean.split(" ")
    pairs = [f"{first} {second}" for first, second in zip(words, words[1:])]
    return [token for token in words + pairs if len(token) >= MIN_TOKEN_LENGTH]


def matches_keywords(tokens: list[str], keywords: tuple[str, ...]) -> bool:
    """Substring containment in either direction between any token and keyword.

    A token only matches inside a longer keyword when it has at least
    ``MIN_REVERSE_MATCH_LENGTH`` characters.
    """
    for keyword in keywords:
        for token in tokens:
            if keyword in token:
                return True
            if len(token) >= MIN_REVERSE_MATCH_LENGTH and token in keyword:
                return True
    return False


# Templates take {frequency}, {period} and {savings} (a formatted amount).
WASTAGE_PATTERNS: tuple[WastagePattern, ...] = (
    WastagePattern(
        key="tobacco",
        keywords=("cigarette", "ciggy", "smoke", "marlboro", "gold flake", "classic", "bidi"),
        category=Category.ENTERTAINMENT,
        priority="high",
        title="🚬 Smoking Expenses ({frequency} purchases)",
        description="You've spent on cigarettes {frequency} times {period}",
        suggestion=(
            "Consider quitting or reducing smoking. This could save you {savings} per year "
            "and improve your health significantly."
        ),
    ),
    WastagePattern(
        key="alcohol",
        keywords=("beer", "wine", "whisky", "vodka", "rum", "drink", "bar", "pub"),
        category=Category.ENTERTAINMENT,
        priority="medium",
        title="🍺 Alcohol Spending ({frequency} times)",
        description="You've purchased alcohol {frequency} times {period}",
        suggestion="Try limiting alcohol purchases to special occasions. You could save {savings} annually.",
    ),
    WastagePattern(
        key="coffee_shop",
        keywords=("starbucks", "cafe coffee day", "barista", "costa", "coffee", "latte", "cappuccino"),
        category=Category.DINING,
        priority="medium",
        title="☕ Coffee Shop Visits ({frequency} times)",
        description="You've visited coffee shops {frequency} times {period}",
        suggestion=(
            "Make coffee at home instead. Investing {equipment_cost} in a good coffee maker "
            "could save you {savings} per year."
        ),
    ),
    WastagePattern(
        key="fast_food",
        keywords=("mcdonalds", "kfc", "pizza hut", "dominos", "burger king", "subway", "fast food"),
        category=Category.DINING,
        priority="medium",
        title="🍔 Fast Food Orders ({frequency} times)",
        description="You've ordered fast food {frequency} times {period}",
        suggestion="Cook more meals at home. You could save {savings} yearly and eat healthier.",
    ),
    WastagePattern(
        key="snacks",
        keywords=("chips", "chocolate", "candy", "biscuits", "cookies", "namkeen", "sweets"),
        category=Category.DINING,
        priority="low",
        title="🍫 Snack Purchases ({frequency} times)",
        description="You've bought snacks {frequency} times {period}",
        suggestion="Buy snacks in bulk or choose healthier alternatives. Potential savings: {savings} per year.",
    ),
    WastagePattern(
        key="impulse_shopping",
        keywords=("amazon", "flipkart", "myntra", "ajio", "online shopping", "sale", "offer"),
        category=Category.SHOPPING,
        priority="low",
        title="🛍️ Impulse Shopping ({frequency} orders)",
        description="You've made {frequency} impulse purchases {period}",
        suggestion="Try the 24-hour rule before buying non-essentials. You could save {savings} annually.",
    ),
)

# One-off spend assumed before coffee savings kick in
COFFEE_EQUIPMENT_COST = 2000
