"""Expense history analysis workflows."""

from spendscan.application.analysis.wastage import WastageRequest, WastageResult, run_wastage_analysis

__all__ = [
    "WastageRequest",
    "WastageResult",
    "run_wastage_analysis",
]
