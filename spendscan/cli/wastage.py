"""Wastage command handler used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from spendscan.runtime import get_logger

logger = get_logger(__name__)


def cmd_wastage(args: argparse.Namespace) -> None:
    """Load an expense history and print wastage alerts."""
    from spendscan.analysis.report import format_wastage_report
    from spendscan.application.analysis.wastage import WastageRequest, run_wastage_analysis
    from spendscan.runtime.settings import get_settings

    if args.period_days <= 0:
        print(f"Error: --period-days must be positive, got {args.period_days}")
        sys.exit(1)

    settings = get_settings()
    result = run_wastage_analysis(
        WastageRequest(expenses_path=Path(args.history), period_days=args.period_days, settings=settings)
    )

    if result.status == "load_failed":
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        sys.exit(1)

    if args.json:
        print(json.dumps([alert.to_dict() for alert in result.alerts], indent=2, ensure_ascii=False))
        return

    print(f"Analyzed {result.expense_count} expenses")
    print(format_wastage_report(result.alerts, currency_symbol=settings.currency_symbol), end="")
