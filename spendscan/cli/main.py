#!/usr/bin/env python3

import argparse
import logging
from collections.abc import Callable, Sequence


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_legacy_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Normalize command handlers that call sys.exit().

    This keeps process termination centralized in this module's entrypoint.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spendscan",
        description="Receipt text extraction and spending wastage analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse <file|->             Parse OCR'd receipt text (use - for stdin)
  scan <image>               OCR a receipt image, then parse it
  wastage <history>          Detect recurring wastage in a CSV/JSON expense history
  serve [--host] [--port]    Start the HTTP API server

Environment:
  SPENDSCAN_LOG_LEVEL, SPENDSCAN_OCR_URL, SPENDSCAN_CATEGORY_RULES,
  SPENDSCAN_DATE_YEAR_MIN, SPENDSCAN_DATE_YEAR_MAX,
  SPENDSCAN_CURRENCY_SYMBOL, SPENDSCAN_SMALL_EXPENSE_THRESHOLD
""",
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Parse OCR'd receipt text")
    parse_parser.add_argument("file", help="Text file with receipt text, or - for stdin")
    parse_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parse_parser.add_argument("--today", help="Reference date (YYYY-MM-DD) for relative/fallback dates")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="OCR a receipt image and parse it")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument("--ocr-url", default=None, help="OCR service URL (default: $SPENDSCAN_OCR_URL)")
    scan_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    # wastage command
    wastage_parser = subparsers.add_parser("wastage", help="Detect recurring wastage in expense history")
    wastage_parser.add_argument("history", help="Expense history file (.csv or .json)")
    wastage_parser.add_argument(
        "--period-days", type=int, default=30, help="Number of days the history covers (default: 30)"
    )
    wastage_parser.add_argument("--json", action="store_true", help="Print alerts as JSON")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.verbose:
        from spendscan.runtime import set_log_level

        set_log_level(logging.DEBUG)

    if args.command == "parse":
        from spendscan.cli.receipt import cmd_parse

        return _run_legacy_command(cmd_parse, args)
    elif args.command == "scan":
        from spendscan.cli.receipt import cmd_scan

        return _run_legacy_command(cmd_scan, args)
    elif args.command == "serve":
        from spendscan.cli.receipt import cmd_serve

        return _run_legacy_command(cmd_serve, args)
    elif args.command == "wastage":
        from spendscan.cli.wastage import cmd_wastage

        return _run_legacy_command(cmd_wastage, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
