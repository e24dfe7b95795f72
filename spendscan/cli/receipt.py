"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from datetime import date
from pathlib import Path

from spendscan.domain.receipt import ReceiptParseResult
from spendscan.runtime import get_logger

logger = get_logger(__name__)


def _print_result(result: ReceiptParseResult, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    from spendscan.receipt.formatter import format_parsed_receipt

    print(format_parsed_receipt(result), end="")


def _parse_today(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        print(f"Error: --today must be YYYY-MM-DD, got {value!r}")
        sys.exit(1)


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse receipt text from a file or stdin and print the result."""
    from spendscan.application.receipts.scan import (
        ReceiptParseRequest,
        run_receipt_parse,
        run_receipt_parse_file,
    )

    today = _parse_today(getattr(args, "today", None))

    if args.file == "-":
        outcome = run_receipt_parse(ReceiptParseRequest(text=sys.stdin.read(), today=today))
    else:
        outcome = run_receipt_parse_file(Path(args.file), today=today)

    if outcome.status == "file_not_found" or outcome.result is None:
        logger.error("%s", outcome.error)
        print(f"Error: {outcome.error}")
        sys.exit(1)

    _print_result(outcome.result, args.json)


def cmd_scan(args: argparse.Namespace) -> None:
    """OCR a receipt image through the OCR service, then parse and print it."""
    from spendscan.application.receipts.scan import ReceiptScanRequest, run_receipt_scan

    result = run_receipt_scan(ReceiptScanRequest(image_path=Path(args.image), ocr_url=args.ocr_url))

    if result.status == "file_not_found":
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        sys.exit(1)

    if result.status == "ocr_unavailable":
        logger.error("%s", result.error)
        print(f"OCR service unavailable: {result.error}")
        print("Make sure the OCR service is running before scanning receipts.")
        sys.exit(1)

    if result.result is None:
        print("Scan failed: missing parse output.")
        sys.exit(1)

    _print_result(result.result, args.json)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server."""
    import uvicorn

    from spendscan.runtime import receipt_server as server

    print(f"Starting spendscan server on {args.host}:{args.port}")
    print(f"Endpoints: http://{args.host}:{args.port}/parse | /wastage | /health")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)
