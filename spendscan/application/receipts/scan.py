"""Receipt parse and scan workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from spendscan.receipt.text_result_parser import parse_receipt
from spendscan.runtime.item_category_rules import load_item_category_rule_layers
from spendscan.runtime.receipt_pipeline import OCRServiceUnavailable, fetch_receipt_text
from spendscan.runtime.settings import Settings, get_settings

if TYPE_CHECKING:
    from spendscan.domain.receipt import ReceiptParseResult

ParseStatus = Literal["file_not_found", "parsed"]
ScanStatus = Literal["file_not_found", "ocr_unavailable", "parsed"]


@dataclass(frozen=True)
class ReceiptParseRequest:
    """Inputs for parsing receipt text that is already available."""

    text: str
    today: date | None = None
    settings: Settings | None = None


@dataclass(frozen=True)
class ReceiptParseOutcome:
    status: ParseStatus
    result: ReceiptParseResult | None = None
    error: str | None = None


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running the image -> OCR -> parse workflow."""

    image_path: Path
    ocr_url: str | None = None
    today: date | None = None
    settings: Settings | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow."""

    status: ScanStatus
    result: ReceiptParseResult | None = None
    raw_text: str | None = None
    error: str | None = None


def parse_receipt_text(text: str, *, today: date | None = None, settings: Settings | None = None) -> ReceiptParseResult:
    """Parse receipt text with the configured date window and category rules."""
    settings = settings or get_settings()
    rules_path = settings.category_rules_path
    rule_layers = load_item_category_rule_layers((str(rules_path),) if rules_path else ())
    return parse_receipt(text, today=today, year_window=settings.year_window, rule_layers=rule_layers)


def run_receipt_parse(request: ReceiptParseRequest) -> ReceiptParseOutcome:
    """Parse already-OCR'd text. Never fails on content; quality is in the result."""
    result = parse_receipt_text(request.text, today=request.today, settings=request.settings)
    return ReceiptParseOutcome(status="parsed", result=result)


def run_receipt_parse_file(path: Path, *, today: date | None = None, settings: Settings | None = None) -> ReceiptParseOutcome:
    """Parse the text stored in ``path``."""
    if not path.exists():
        return ReceiptParseOutcome(status="file_not_found", error=f"Receipt text file not found: {path}")
    text = path.read_text(encoding="utf-8", errors="replace")
    return run_receipt_parse(ReceiptParseRequest(text=text, today=today, settings=settings))


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: OCR service -> text -> parse."""
    if not request.image_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    settings = request.settings or get_settings()
    try:
        raw_text = fetch_receipt_text(request.image_path, request.ocr_url or settings.ocr_url)
    except OCRServiceUnavailable as exc:
        return ReceiptScanResult(
            status="ocr_unavailable",
            error=str(exc),
        )

    result = parse_receipt_text(raw_text, today=request.today, settings=settings)
    return ReceiptScanResult(status="parsed", result=result, raw_text=raw_text)
