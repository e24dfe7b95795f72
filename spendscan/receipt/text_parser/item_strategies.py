"""Line-item extraction strategies.

Each strategy looks at a single receipt line and either returns a raw
``ItemCandidate`` or ``None``. Strategies are tried in priority order by
``items_text_parser``; validation (name cleanup, amount bounds) happens there
so every strategy is held to the same rules.
"""

import re
from dataclasses import dataclass
from typing import Protocol

from .common import DECIMAL_AMOUNT, TRAILING_AMOUNT_RE

# Prices carry cents; bare integers are table, register and invoice numbers
PRICE = rf"(?P<price>\$?\s?{DECIMAL_AMOUNT})"
# Lazy name that must contain at least one letter
NAME = r"(?P<name>.*?[A-Za-z].*?)"


@dataclass(frozen=True)
class ItemCandidate:
    """Unvalidated item pulled out of one line."""

    name: str
    amount_text: str
    quantity: int = 1


class ItemStrategy(Protocol):
    """Common interface for line-item strategies."""

    name: str

    def attempt(self, line: str) -> ItemCandidate | None: ...


class RegexItemStrategy:
    """Strategy driven by one anchored pattern with ``name`` and ``price`` groups."""

    name = "regex"
    pattern: re.Pattern[str]

    def attempt(self, line: str) -> ItemCandidate | None:
        match = self.pattern.match(line)
        if match is None:
            return None
        return self._build(match)

    def _build(self, match: re.Match[str]) -> ItemCandidate | None:
        return ItemCandidate(name=match.group("name"), amount_text=match.group("price"))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class QuantityPrefixedStrategy(RegexItemStrategy):
    """``2 x Milk 5.00`` -> Milk, quantity 2."""

    name = "quantity_prefixed"
    pattern = re.compile(rf"^(?P<qty>\d{{1,3}})\s*[xX@*]\s+{NAME}\s+{PRICE}\s*$")

    def _build(self, match: re.Match[str]) -> ItemCandidate | None:
        quantity = int(match.group("qty"))
        if quantity < 1:
            return None
        return ItemCandidate(name=match.group("name"), amount_text=match.group("price"), quantity=quantity)


class PriceFirstStrategy(RegexItemStrategy):
    """``5.00 Milk`` -> Milk."""

    name = "price_first"
    pattern = re.compile(rf"^(?P<price>\$?\s?{DECIMAL_AMOUNT})\s+(?P<name>[A-Za-z].*?)\s*$")

    def _build(self, match: re.Match[str]) -> ItemCandidate | None:
        name = match.group("name")
        # "5.00 Milk 2.50" is a name/price line with a leading number, not price-first
        if TRAILING_AMOUNT_RE.search(name):
            return None
        return ItemCandidate(name=name, amount_text=match.group("price"))


class SkuPrefixedStrategy(RegexItemStrategy):
    """``0123456 Milk 5.00`` (department-store SKU lines) -> Milk."""

    name = "sku_prefixed"
    pattern = re.compile(rf"^(?P<sku>\d{{4,}})\s+{NAME}\s+{PRICE}\s*$")


class TrailingPriceStrategy(RegexItemStrategy):
    """``Milk 5.00`` -> Milk."""

    name = "trailing_price"
    pattern = re.compile(rf"^{NAME}\s+{PRICE}\s*$")


class AnyPriceFallback:
    """Last resort: first two-place amount anywhere in the line.

    Everything before the amount becomes the name, provided the amount does not
    sit at the very start of the line.
    """

    name = "any_price"
    pattern = re.compile(DECIMAL_AMOUNT)
    min_price_index = 4

    def attempt(self, line: str) -> ItemCandidate | None:
        match = self.pattern.search(line)
        if match is None or match.start() < self.min_price_index:
            return None
        return ItemCandidate(name=line[: match.start()], amount_text=match.group(0))


DEFAULT_ITEM_STRATEGIES: tuple[ItemStrategy, ...] = (
    QuantityPrefixedStrategy(),
    PriceFirstStrategy(),
    SkuPrefixedStrategy(),
    TrailingPriceStrategy(),
)

FALLBACK_ITEM_STRATEGY: ItemStrategy = AnyPriceFallback()
