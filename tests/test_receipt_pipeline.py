"""Tests for the OCR service client."""

from pathlib import Path

import httpx
import pytest

from spendscan.runtime import receipt_pipeline
from spendscan.runtime.receipt_pipeline import (
    OCRServiceUnavailable,
    _detections_to_text,
    fetch_receipt_text,
    ocr_text_from_result,
)


@pytest.fixture
def image(tmp_path: Path) -> Path:
    path = tmp_path / "receipt.jpg"
    path.write_bytes(b"\xff\xd8fake-jpeg")
    return path


def test_fetch_receipt_text(monkeypatch: pytest.MonkeyPatch, image: Path) -> None:
    calls = []

    def fake_post(url, **kwargs):
        calls.append((url, kwargs))
        return httpx.Response(200, json={"full_text": "WALMART\nMilk 2.50"})

    monkeypatch.setattr(receipt_pipeline.httpx, "post", fake_post)

    assert fetch_receipt_text(image, "http://ocr.local/") == "WALMART\nMilk 2.50"
    url, kwargs = calls[0]
    assert url == "http://ocr.local/ocr"
    name, content, content_type = kwargs["files"]["file"]
    assert (name, content, content_type) == ("receipt.jpg", b"\xff\xd8fake-jpeg", "image/jpeg")


def test_fetch_receipt_text_error_status(monkeypatch: pytest.MonkeyPatch, image: Path) -> None:
    monkeypatch.setattr(receipt_pipeline.httpx, "post", lambda url, **kwargs: httpx.Response(503, text="down"))

    with pytest.raises(OCRServiceUnavailable, match="503"):
        fetch_receipt_text(image, "http://ocr.local")


def test_fetch_receipt_text_connection_error(monkeypatch: pytest.MonkeyPatch, image: Path) -> None:
    def fake_post(url, **kwargs):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(receipt_pipeline.httpx, "post", fake_post)

    with pytest.raises(OCRServiceUnavailable, match="Failed to connect"):
        fetch_receipt_text(image, "http://ocr.local")


def test_fetch_receipt_text_invalid_json(monkeypatch: pytest.MonkeyPatch, image: Path) -> None:
    monkeypatch.setattr(receipt_pipeline.httpx, "post", lambda url, **kwargs: httpx.Response(200, text="<html>"))

    with pytest.raises(OCRServiceUnavailable, match="invalid JSON"):
        fetch_receipt_text(image, "http://ocr.local")


def test_ocr_text_from_result_prefers_full_text() -> None:
    assert ocr_text_from_result({"full_text": "a", "text": "b"}) == "a"
    assert ocr_text_from_result({"text": "b"}) == "b"
    assert ocr_text_from_result({}) == ""


def test_detections_to_text_groups_lines() -> None:
    detections = [
        [[[120, 52], [160, 52], [160, 68], [120, 68]], ["2.50", 0.95]],
        [[[10, 50], [60, 50], [60, 70], [10, 70]], ["Milk", 0.9]],
        [[[10, 10], [90, 10], [90, 30], [10, 30]], ["WALMART", 0.99]],
        [[[10, 90], [60, 90], [60, 110], [10, 110]], ["smudge", 0.3]],
        ["garbage"],
    ]

    assert _detections_to_text(detections) == "WALMART\nMilk 2.50"
    assert ocr_text_from_result({"detections": detections}) == "WALMART\nMilk 2.50"
