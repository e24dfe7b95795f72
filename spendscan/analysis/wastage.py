"""Recurring wastage detection over an expense history.

Two independent passes:

- named patterns (tobacco, alcohol, coffee shops, ...) matched by keyword
- frequent small expenses sharing the same description

Amounts are projected from the observed window to a month and a year. The
history is assumed to cover ``period_days`` days (30 by default, i.e. one
month), so ``monthly_impact = total * 30 / period_days``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from spendscan.domain.expense import Expense, Severity, WastageAlert
from spendscan.runtime.logging import get_logger

from .wastage_patterns import COFFEE_EQUIPMENT_COST, WASTAGE_PATTERNS, WastagePattern

logger = get_logger(__name__)

CENTS = Decimal("0.01")
DAYS_PER_MONTH = Decimal("30")
MONTHS_PER_YEAR = 12

DEFAULT_PERIOD_DAYS = 30
DEFAULT_SMALL_EXPENSE_THRESHOLD = Decimal("200")
DEFAULT_CURRENCY_SYMBOL = "₹"

# Named-pattern alert gate
MIN_PATTERN_FREQUENCY = 3
MIN_PATTERN_TOTAL = Decimal("500")

# Frequent-small alert gate
MIN_SMALL_FREQUENCY = 4
MIN_SMALL_YEARLY_IMPACT = Decimal("1000")

_SPACES_RE = re.compile(r"\s+")


def format_currency(amount: Decimal, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """``12000`` -> ``₹12,000``; ``1234.5`` -> ``₹1,234.50``."""
    amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    if amount == amount.to_integral_value():
        return f"{symbol}{amount:,.0f}"
    return f"{symbol}{amount:,.2f}"


def _as_expenses(expenses: Iterable[Expense | Mapping[str, Any]]) -> list[Expense]:
    return [e if isinstance(e, Expense) else Expense.from_mapping(e) for e in expenses]


def _period_phrase(period_days: int) -> str:
    return "this month" if period_days == DEFAULT_PERIOD_DAYS else f"in the last {period_days} days"


def _project(total: Decimal, period_days: int) -> tuple[Decimal, Decimal]:
    """Return (monthly, yearly) impact for a total observed over ``period_days``."""
    monthly = (total * DAYS_PER_MONTH / Decimal(period_days)).quantize(CENTS, rounding=ROUND_HALF_UP)
    return monthly, monthly * MONTHS_PER_YEAR


def _pattern_severity(yearly: Decimal, pattern: WastagePattern) -> Severity:
    if yearly > 10000 or pattern.priority == "high":
        return Severity.HIGH
    if yearly > 5000 or pattern.priority == "medium":
        return Severity.MEDIUM
    return Severity.LOW


def _small_expense_severity(yearly: Decimal) -> Severity:
    if yearly > 5000:
        return Severity.HIGH
    if yearly > 2000:
        return Severity.MEDIUM
    return Severity.LOW


def _validate_period(period_days: int) -> None:
    if period_days <= 0:
        raise ValueError(f"period_days must be positive, got {period_days}")


def detect_named_patterns(
    expenses: Iterable[Expense | Mapping[str, Any]],
    *,
    period_days: int = DEFAULT_PERIOD_DAYS,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    patterns: Sequence[WastagePattern] = WASTAGE_PATTERNS,
) -> list[WastageAlert]:
    """
    Group expenses by named wastage pattern and alert on significant groups.

    One expense can match several patterns. A group becomes an alert when it
    has at least 3 expenses or its total exceeds 500.
    """
    _validate_period(period_days)
    history = _as_expenses(expenses)

    groups: dict[str, list[Expense]] = {}
    for expense in history:
        for pattern in patterns:
            if pattern.matches(expense.description):
                groups.setdefault(pattern.key, []).append(expense)

    alerts: list[WastageAlert] = []
    for pattern in patterns:
        matched = groups.get(pattern.key)
        if not matched:
            continue

        total = sum((e.amount for e in matched), Decimal("0"))
        frequency = len(matched)
        if frequency < MIN_PATTERN_FREQUENCY and total <= MIN_PATTERN_TOTAL:
            continue

        monthly, yearly = _project(total, period_days)
        savings = yearly
        if pattern.key == "coffee_shop":
            savings = max(yearly - COFFEE_EQUIPMENT_COST, Decimal("0"))

        template_values = {
            "frequency": frequency,
            "period": _period_phrase(period_days),
            "savings": format_currency(savings, currency_symbol),
            "equipment_cost": format_currency(Decimal(COFFEE_EQUIPMENT_COST), currency_symbol),
        }
        alert = WastageAlert(
            id=f"wastage-{pattern.key}",
            pattern_key=pattern.key,
            kind="named_pattern",
            title=pattern.title.format(**template_values),
            description=pattern.description.format(**template_values),
            total_amount=total,
            frequency=frequency,
            monthly_impact=monthly,
            yearly_impact=yearly,
            severity=_pattern_severity(yearly, pattern),
            suggestion=pattern.suggestion.format(**template_values),
            category=pattern.category,
            matched_expenses=tuple(matched),
        )
        logger.debug("Wastage alert %s: %d expenses, yearly %s", alert.id, frequency, yearly)
        alerts.append(alert)

    return sorted(alerts, key=lambda a: a.yearly_impact, reverse=True)


def detect_frequent_small_expenses(
    expenses: Iterable[Expense | Mapping[str, Any]],
    *,
    threshold: Decimal | int = DEFAULT_SMALL_EXPENSE_THRESHOLD,
    period_days: int = DEFAULT_PERIOD_DAYS,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> list[WastageAlert]:
    """
    Alert on small expenses that keep recurring under the same description.

    Expenses with ``0 < amount <= threshold`` are grouped by lowercased,
    trimmed description. A group alerts when it occurs at least 4 times and
    its yearly impact exceeds 1000.
    """
    _validate_period(period_days)
    threshold = Decimal(threshold)

    groups: dict[str, list[Expense]] = {}
    for expense in _as_expenses(expenses):
        key = expense.description.lower().strip()
        if not key or not (0 < expense.amount <= threshold):
            continue
        groups.setdefault(key, []).append(expense)

    alerts: list[WastageAlert] = []
    for description, matched in groups.items():
        if len(matched) < MIN_SMALL_FREQUENCY:
            continue

        total = sum((e.amount for e in matched), Decimal("0"))
        monthly, yearly = _project(total, period_days)
        if yearly <= MIN_SMALL_YEARLY_IMPACT:
            continue

        alert = WastageAlert(
            id=f"frequent-{_SPACES_RE.sub('-', description)}",
            pattern_key=description,
            kind="frequent_small",
            title="💸 Frequent Small Expense",
            description=f'"{description}" appears {len(matched)} times',
            total_amount=total,
            frequency=len(matched),
            monthly_impact=monthly,
            yearly_impact=yearly,
            severity=_small_expense_severity(yearly),
            suggestion=(
                f"These small expenses add up to {format_currency(yearly, currency_symbol)} yearly. "
                "Consider if they're truly necessary."
            ),
            matched_expenses=tuple(matched),
        )
        logger.debug("Wastage alert %s: %d expenses, yearly %s", alert.id, len(matched), yearly)
        alerts.append(alert)

    return sorted(alerts, key=lambda a: a.yearly_impact, reverse=True)


def detect_wastage(
    expenses: Iterable[Expense | Mapping[str, Any]],
    *,
    period_days: int = DEFAULT_PERIOD_DAYS,
    small_expense_threshold: Decimal | int = DEFAULT_SMALL_EXPENSE_THRESHOLD,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> list[WastageAlert]:
    """
    Run both detection passes and rank the alerts by yearly impact.

    Args:
        expenses: Expense objects or loose mappings with ``amount`` and ``description``
        period_days: Number of days the history covers
        small_expense_threshold: Upper bound for the frequent-small pass
        currency_symbol: Symbol used in suggestion text

    Raises:
        ValueError: ``period_days`` is not positive
    """
    history = _as_expenses(expenses)
    alerts = detect_named_patterns(history, period_days=period_days, currency_symbol=currency_symbol)
    alerts += detect_frequent_small_expenses(
        history,
        threshold=small_expense_threshold,
        period_days=period_days,
        currency_symbol=currency_symbol,
    )
    return sorted(alerts, key=lambda a: a.yearly_impact, reverse=True)
