"""Data models for receipt text parsing."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from spendscan.domain.categories import Category


class Confidence(str, Enum):
    """How much structure was recovered from the receipt text."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class LineItem:
    """A single purchased item on a receipt."""

    name: str
    amount: Decimal
    category: Category = Category.OTHER
    quantity: int = 1
    # True only for the synthetic item emitted when nothing could be extracted.
    placeholder: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "amount": f"{self.amount:.2f}",
            "category": self.category.value,
            "quantity": self.quantity,
            "placeholder": self.placeholder,
        }


@dataclass(frozen=True)
class ReceiptParseResult:
    """Parsed receipt data.

    ``items`` holds the extracted line items, or a single placeholder item when
    neither items nor a total could be recovered. ``total`` is the sum of real
    item amounts when there are any; otherwise it is the explicit total found
    in the text, or zero.
    """

    date: date
    merchant: str
    total: Decimal
    success: bool
    confidence: Confidence
    items: tuple[LineItem, ...] = field(default_factory=tuple)
    raw_text: str = ""  # Original OCR text for reference

    @property
    def real_items(self) -> tuple[LineItem, ...]:
        return tuple(item for item in self.items if not item.placeholder)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "merchant": self.merchant,
            "items": [item.to_dict() for item in self.items],
            "total": f"{self.total:.2f}",
            "success": self.success,
            "confidence": self.confidence.value,
        }
