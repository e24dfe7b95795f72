"""Expense history and wastage alert models."""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Literal

from spendscan.domain.categories import Category

AlertKind = Literal["named_pattern", "frequent_small"]


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _coerce_amount(value: Any) -> Decimal:
    """Best-effort amount conversion; unreadable values count as zero."""
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        return Decimal("0")
    text = str(value).replace(",", "").replace("$", "").replace("₹", "").strip()
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


def _coerce_date(value: Any) -> datetime.date | None:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not value:
        return None
    try:
        return datetime.date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


@dataclass(frozen=True)
class Expense:
    """One persisted expense record, as seen by the wastage detector."""

    amount: Decimal
    description: str
    category: str | None = None
    date: datetime.date | None = None
    id: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Expense:
        """Build an Expense from a loosely-typed record (JSON row, CSV row)."""
        raw_id = data.get("id")
        raw_category = data.get("category")
        return cls(
            amount=_coerce_amount(data.get("amount")),
            description=str(data.get("description") or ""),
            category=str(raw_category) if raw_category else None,
            date=_coerce_date(data.get("date")),
            id=str(raw_id) if raw_id not in (None, "") else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "amount": f"{self.amount:.2f}",
            "description": self.description,
            "category": self.category,
            "date": self.date.isoformat() if self.date else None,
        }


@dataclass(frozen=True)
class WastageAlert:
    """A recurring spending habit worth reducing, with its projected cost."""

    id: str
    pattern_key: str
    kind: AlertKind
    title: str
    description: str
    total_amount: Decimal
    frequency: int
    monthly_impact: Decimal
    yearly_impact: Decimal
    severity: Severity
    suggestion: str
    category: Category | None = None
    matched_expenses: tuple[Expense, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "pattern_key": self.pattern_key,
            "kind": self.kind,
            "title": self.title,
            "description": self.description,
            "total_amount": f"{self.total_amount:.2f}",
            "frequency": self.frequency,
            "monthly_impact": f"{self.monthly_impact:.2f}",
            "yearly_impact": f"{self.yearly_impact:.2f}",
            "severity": self.severity.value,
            "category": self.category.value if self.category else None,
            "suggestion": self.suggestion,
            "matched_expenses": [expense.to_dict() for expense in self.matched_expenses],
        }
