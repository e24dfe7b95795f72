"""Runtime helpers for the receipt OCR pipeline (non-HTTP)."""

import time
from pathlib import Path
from typing import Any

import httpx

from spendscan.runtime.logging import get_logger

logger = get_logger(__name__)

OCR_TIMEOUT_SECONDS = 60.0
MIN_DETECTION_CONFIDENCE = 0.7
# Detections whose vertical centers are this close share a text line
LINE_Y_TOLERANCE = 10.0

_IMAGE_CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".heic": "image/heic",
}


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def _detections_to_text(detections: list[Any]) -> str:
    """Rebuild reading-order text from ``[bbox, [text, confidence]]`` detections."""
    boxes: list[tuple[float, float, str]] = []
    for detection in detections:
        try:
            bbox, (text, confidence) = detection
            center_y = sum(point[1] for point in bbox) / len(bbox)
            min_x = min(point[0] for point in bbox)
        except (TypeError, ValueError, IndexError, ZeroDivisionError):
            continue
        if confidence < MIN_DETECTION_CONFIDENCE or not str(text).strip():
            continue
        boxes.append((center_y, min_x, str(text).strip()))

    lines: list[list[tuple[float, float, str]]] = []
    for box in sorted(boxes):
        if lines and abs(lines[-1][0][0] - box[0]) <= LINE_Y_TOLERANCE:
            lines[-1].append(box)
        else:
            lines.append([box])

    return "\n".join(" ".join(text for _, _, text in sorted(line, key=lambda b: b[1])) for line in lines)


def ocr_text_from_result(raw_result: dict[str, Any]) -> str:
    """Pull plain receipt text out of an OCR service response."""
    for key in ("full_text", "text"):
        value = raw_result.get(key)
        if isinstance(value, str):
            return value
    detections = raw_result.get("detections")
    if isinstance(detections, list):
        return _detections_to_text(detections)
    return ""


def fetch_receipt_text(image_path: Path, ocr_url: str, *, timeout: float = OCR_TIMEOUT_SECONDS) -> str:
    """
    Send a receipt image to the OCR service and return the recognized text.

    Raises:
        OCRServiceUnavailable: the service could not be reached, answered with a
            non-200 status, or returned something that is not JSON.
    """
    ocr_url = ocr_url.rstrip("/")
    logger.info("Sending receipt to OCR service at %s...", ocr_url)

    content_type = _IMAGE_CONTENT_TYPES.get(image_path.suffix.lower(), "application/octet-stream")
    image_bytes = image_path.read_bytes()

    try:
        start_time = time.time()
        response = httpx.post(
            f"{ocr_url}/ocr",
            files={"file": (image_path.name, image_bytes, content_type)},
            timeout=timeout,
        )
        elapsed_time = time.time() - start_time
        logger.info("OCR service returned in %.2f seconds", elapsed_time)
    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

    if response.status_code != 200:
        # Response body may contain receipt text; keep it out of error logs
        logger.error("OCR service error: %s", response.status_code)
        logger.debug("OCR service error body: %s", response.text)
        raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

    try:
        raw_result = response.json()
    except ValueError as e:
        raise OCRServiceUnavailable("OCR service returned invalid JSON") from e

    if not isinstance(raw_result, dict):
        raise OCRServiceUnavailable("OCR service returned an unexpected payload")
    return ocr_text_from_result(raw_result)
