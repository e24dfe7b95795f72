"""Wastage analysis workflow: expense history file -> ranked alerts."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from spendscan.analysis.wastage import detect_wastage
from spendscan.domain.expense import WastageAlert
from spendscan.runtime.expense_loader import ExpenseLoadError, load_expenses
from spendscan.runtime.settings import Settings, get_settings

WastageStatus = Literal["load_failed", "analyzed"]


@dataclass(frozen=True)
class WastageRequest:
    """Inputs for analyzing an expense history file."""

    expenses_path: Path
    period_days: int = 30
    settings: Settings | None = None


@dataclass(frozen=True)
class WastageResult:
    status: WastageStatus
    alerts: list[WastageAlert] = field(default_factory=list)
    expense_count: int = 0
    error: str | None = None


def run_wastage_analysis(request: WastageRequest) -> WastageResult:
    """Load the history and run both wastage passes with configured thresholds."""
    settings = request.settings or get_settings()
    try:
        expenses = load_expenses(request.expenses_path)
    except ExpenseLoadError as exc:
        return WastageResult(status="load_failed", error=str(exc))

    alerts = detect_wastage(
        expenses,
        period_days=request.period_days,
        small_expense_threshold=settings.small_expense_threshold,
        currency_symbol=settings.currency_symbol,
    )
    return WastageResult(status="analyzed", alerts=alerts, expense_count=len(expenses))
