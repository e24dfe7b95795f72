"""Receipt workflows."""

from spendscan.application.receipts.scan import (
    ReceiptParseOutcome,
    ReceiptParseRequest,
    ReceiptScanRequest,
    ReceiptScanResult,
    parse_receipt_text,
    run_receipt_parse,
    run_receipt_parse_file,
    run_receipt_scan,
)

__all__ = [
    "ReceiptParseOutcome",
    "ReceiptParseRequest",
    "ReceiptScanRequest",
    "ReceiptScanResult",
    "parse_receipt_text",
    "run_receipt_parse",
    "run_receipt_parse_file",
    "run_receipt_scan",
]
