"""FastAPI server exposing receipt parsing and wastage analysis."""

import hashlib
import json
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from spendscan.analysis.wastage import detect_wastage
from spendscan.application.receipts.scan import parse_receipt_text
from spendscan.runtime.expense_loader import ExpenseLoadError, expenses_from_records
from spendscan.runtime.logging import get_logger
from spendscan.runtime.processing_cache import ProcessingCache, file_fingerprint
from spendscan.runtime.settings import Settings, get_settings

logger = get_logger(__name__)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


async def _read_json(request: Request) -> Any:
    body = await request.body()
    try:
        return json.loads(body or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


async def _read_parse_upload(request: Request) -> tuple[str, str] | JSONResponse:
    """Return (text, fingerprint) for a JSON or multipart /parse request."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        file = None
        for key, value in form.items():
            logger.debug("Form field: key=%r, type=%s", key, type(value))
            if hasattr(value, "read"):
                file = value
                break
        if file is None:
            return _error("No file found in request", 400)

        contents = await file.read()
        filename = getattr(file, "filename", None) or "upload.txt"
        last_modified = form.get("last_modified")
        fingerprint = file_fingerprint(filename, len(contents), last_modified if isinstance(last_modified, str) else None)
        return contents.decode("utf-8", errors="replace"), fingerprint

    payload = await _read_json(request)
    if not isinstance(payload, dict):
        return _error("Expected a JSON object or a multipart file upload", 400)
    text = payload.get("text")
    if not isinstance(text, str):
        return _error("Field 'text' must be a string", 422)
    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]
    return text, file_fingerprint(f"text:{digest}", len(text))


def create_app(cache: ProcessingCache | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the API app. The processing cache and settings are injectable for tests."""
    app = FastAPI(title="spendscan")
    app.state.processing_cache = cache if cache is not None else ProcessingCache()
    app.state.settings = settings if settings is not None else get_settings()

    @app.post("/parse")
    async def parse(request: Request) -> JSONResponse:
        """Parse receipt text sent as JSON ``{"text": ...}`` or a multipart text file."""
        upload = await _read_parse_upload(request)
        if isinstance(upload, JSONResponse):
            return upload
        text, fingerprint = upload

        processing_cache: ProcessingCache = request.app.state.processing_cache
        processing_cache.evict_expired()

        cached = processing_cache.get_cached_result(fingerprint)
        if cached is not None:
            logger.debug("Returning cached parse result for %s", fingerprint)
            return JSONResponse(cached)

        if not processing_cache.begin(fingerprint):
            return _error("Upload already being processed or too many requests", 429)

        try:
            result = parse_receipt_text(text, settings=request.app.state.settings)
        except Exception:
            processing_cache.release(fingerprint)
            raise

        payload = result.to_dict()
        processing_cache.mark_complete(fingerprint, payload)
        logger.info(
            "Parsed receipt: %s, %s items, confidence %s",
            result.merchant,
            len(result.real_items),
            result.confidence.value,
        )
        return JSONResponse(payload)

    @app.post("/wastage")
    async def wastage(request: Request) -> JSONResponse:
        """Detect wastage in a JSON list of expenses (or ``{"expenses": [...], "period_days": N}``)."""
        payload = await _read_json(request)
        if payload is None:
            return _error("Expected a JSON body", 400)

        period_days = 30
        if isinstance(payload, dict) and "period_days" in payload:
            period_days = payload["period_days"]
            if not isinstance(period_days, int) or isinstance(period_days, bool) or period_days <= 0:
                return _error("Field 'period_days' must be a positive integer", 422)

        try:
            expenses = expenses_from_records(payload)
        except ExpenseLoadError as exc:
            return _error(str(exc), 422)

        settings: Settings = request.app.state.settings
        alerts = detect_wastage(
            expenses,
            period_days=period_days,
            small_expense_threshold=settings.small_expense_threshold,
            currency_symbol=settings.currency_symbol,
        )
        return JSONResponse({"count": len(alerts), "alerts": [alert.to_dict() for alert in alerts]})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8080)
