"""Tests for the spendscan command line."""

import json
from pathlib import Path

import pytest

from spendscan.application.receipts import scan as scan_workflow
from spendscan.cli.main import main
from spendscan.runtime.receipt_pipeline import OCRServiceUnavailable


@pytest.fixture
def receipt_file(tmp_path: Path, walmart_receipt: str) -> Path:
    path = tmp_path / "receipt.txt"
    path.write_text(walmart_receipt, encoding="utf-8")
    return path


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "usage: spendscan" in capsys.readouterr().out


def test_parse_json(receipt_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["parse", str(receipt_file), "--json", "--today", "2025-06-01"]) == 0

    body = json.loads(capsys.readouterr().out)
    assert body["merchant"] == "WALMART"
    assert body["total"] == "5.50"
    assert body["confidence"] == "high"


def test_parse_text_output(receipt_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["parse", str(receipt_file)]) == 0

    out = capsys.readouterr().out
    assert "Merchant:   WALMART" in out
    assert "Total:      5.50" in out


def test_parse_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    import io

    monkeypatch.setattr("sys.stdin", io.StringIO("ACME STORE\nTOTAL: 42.00\n"))

    assert main(["parse", "-", "--json", "--today", "2025-06-01"]) == 0
    body = json.loads(capsys.readouterr().out)
    assert body["confidence"] == "medium"
    assert body["date"] == "2025-06-01"


def test_parse_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["parse", str(tmp_path / "missing.txt")]) == 1
    assert "not found" in capsys.readouterr().out


def test_parse_bad_today(receipt_file: Path) -> None:
    assert main(["parse", str(receipt_file), "--today", "June 1st"]) == 1


def test_wastage_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    history = tmp_path / "history.csv"
    history.write_text(
        "description,amount\nCigarettes,50\nCigarettes,50\nCigarettes,50\nRent,15000\n",
        encoding="utf-8",
    )

    assert main(["wastage", str(history)]) == 0
    out = capsys.readouterr().out
    assert "Analyzed 4 expenses" in out
    assert "Smoking Expenses (3 purchases)" in out


def test_wastage_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    history = tmp_path / "history.json"
    history.write_text(json.dumps([{"description": "Cigarettes", "amount": 50}] * 3), encoding="utf-8")

    assert main(["wastage", str(history), "--json", "--period-days", "15"]) == 0
    (alert,) = json.loads(capsys.readouterr().out)
    assert alert["id"] == "wastage-tobacco"
    assert alert["monthly_impact"] == "300.00"


def test_wastage_missing_file(tmp_path: Path) -> None:
    assert main(["wastage", str(tmp_path / "missing.csv")]) == 1


def test_wastage_bad_period(tmp_path: Path) -> None:
    history = tmp_path / "history.json"
    history.write_text("[]", encoding="utf-8")

    assert main(["wastage", str(history), "--period-days", "0"]) == 1


def test_scan_missing_image(tmp_path: Path) -> None:
    assert main(["scan", str(tmp_path / "missing.jpg")]) == 1


def test_scan_parses_ocr_text(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    walmart_receipt: str,
    capsys: pytest.CaptureFixture[str],
) -> None:
    image = tmp_path / "receipt.jpg"
    image.write_bytes(b"fake")
    seen = {}

    def fake_fetch(image_path: Path, ocr_url: str) -> str:
        seen["url"] = ocr_url
        return walmart_receipt

    monkeypatch.setattr(scan_workflow, "fetch_receipt_text", fake_fetch)

    assert main(["scan", str(image), "--ocr-url", "http://ocr:9000", "--json"]) == 0
    assert seen["url"] == "http://ocr:9000"
    assert json.loads(capsys.readouterr().out)["merchant"] == "WALMART"


def test_scan_ocr_unavailable(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    image = tmp_path / "receipt.jpg"
    image.write_bytes(b"fake")

    def fake_fetch(image_path: Path, ocr_url: str) -> str:
        raise OCRServiceUnavailable("Failed to connect to OCR service")

    monkeypatch.setattr(scan_workflow, "fetch_receipt_text", fake_fetch)

    assert main(["scan", str(image)]) == 1
    assert "OCR service unavailable" in capsys.readouterr().out


def test_verbose_enables_debug_logging(receipt_file: Path) -> None:
    import logging

    logger = logging.getLogger("spendscan")
    previous = logger.level
    try:
        assert main(["--verbose", "parse", str(receipt_file), "--json"]) == 0
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)
