"""Load expense history files (CSV or JSON) for the wastage detector."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from spendscan.domain.expense import Expense
from spendscan.runtime.logging import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("amount", "description")


class ExpenseLoadError(ValueError):
    """Raised when an expense history file cannot be read or lacks required fields."""


def expenses_from_records(records: Any) -> list[Expense]:
    """Convert a list of mappings (JSON rows, API bodies) into Expense objects."""
    if isinstance(records, dict) and "expenses" in records:
        records = records["expenses"]
    if not isinstance(records, list):
        raise ExpenseLoadError("Expected a list of expense objects")

    expenses: list[Expense] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ExpenseLoadError(f"Expense #{index} is not an object")
        expenses.append(Expense.from_mapping(record))
    return expenses


def _read_csv(path: Path) -> list[Expense]:
    import pandas as pd

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ExpenseLoadError(f"Could not read CSV {path}: {e}") from e

    df.columns = [str(column).strip().lower() for column in df.columns]
    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise ExpenseLoadError(f"{path} is missing column(s): {', '.join(missing)}")

    return [Expense.from_mapping(row) for row in df.to_dict(orient="records")]


def _read_json(path: Path) -> list[Expense]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ExpenseLoadError(f"Could not read JSON {path}: {e}") from e
    return expenses_from_records(payload)


def load_expenses(path: Path | str) -> list[Expense]:
    """
    Load expenses from a ``.csv`` or ``.json`` file.

    CSV files need ``amount`` and ``description`` columns; ``category``,
    ``date`` and ``id`` are optional. JSON files hold a list of objects with
    the same keys (or ``{"expenses": [...]}``).

    Raises:
        ExpenseLoadError: missing file, unknown extension, or unreadable content
    """
    path = Path(path)
    if not path.exists():
        raise ExpenseLoadError(f"Expense file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        expenses = _read_csv(path)
    elif suffix == ".json":
        expenses = _read_json(path)
    else:
        raise ExpenseLoadError(f"Unsupported expense file type: {path.suffix or '(none)'}")

    logger.debug("Loaded %d expenses from %s", len(expenses), path)
    return expenses
