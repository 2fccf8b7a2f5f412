"""
api.py

WHAT THIS FILE IS FOR
---------------------
This module defines the FastAPI application entrypoint for the
Resume Review & Sheet Append API.

It is responsible for:
- Creating the FastAPI app instance (title/version/description)
- Registering middleware for correlation ID propagation (X-Correlation-Id)
- Rendering errors in each handler's own envelope:
    - resume intake: {error, errorType, message[, details]}
    - sheet append:  {ok: false, error}
    - anything else: {code, message, subErrors, timestamp, correlationId}
- Exposing HTTP endpoints:
    - GET  /health and /healthz
    - POST /api/analyze-resume          (multipart resume upload)
    - POST /api/sheets-append           (JSON object -> one spreadsheet row)
    - OPTIONS /api/sheets-append        (CORS preflight)

HANDLER INDEPENDENCE
--------------------
The two handlers share no business code and no state. A misconfigured
spreadsheet never affects resume intake and vice versa; each reports
its own failures per request.

DESIGN INTENT
-------------
This file contains ONLY the HTTP layer:
- routing
- middleware
- exception handling
- response formatting

Blocking work (PDF extraction, completion calls, spreadsheet calls) runs
in the threadpool. The logic itself lives in:
- functions/resume_review/*
- functions/sheet_append/*
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from functions.resume_review.intake_errors import IntakeError, IntakeErrorType
from functions.resume_review.intake_pipeline import ResumeIntakePipeline
from functions.resume_review.review_service import ResumeReviewService
from functions.resume_review.upload_form import parse_upload_form
from functions.sheet_append.record_flattener import flatten
from functions.sheet_append.row_appender import SheetRowAppender, resolve_target_tab
from functions.sheet_append.sheets_client import GoogleSheetsClient
from functions.utils.logging_config import configure_logging
from functions.utils.settings import get_settings
from schemas.response_schema import IntakeErrorResponse, IntakeSuccessResponse, SheetAppendResponse

logger = structlog.get_logger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

reviewer = ResumeReviewService(settings)
pipeline = ResumeIntakePipeline(settings, analyze=reviewer.analyze)
appender = SheetRowAppender(GoogleSheetsClient(settings), default_tab=settings.sheet_name)

app = FastAPI(
    title="Resume Review & Sheet Append API",
    version="1.0.0",
    description="Resume PDF review via a completion service, and JSON-to-spreadsheet row appends.",
)

CORRELATION_HEADER = "X-Correlation-Id"
INTAKE_PATH = "/api/analyze-resume"
SHEETS_PATH = "/api/sheets-append"


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
def _get_or_create_correlation_id(request: Request) -> str:
    incoming = request.headers.get(CORRELATION_HEADER)
    return incoming.strip() if incoming and incoming.strip() else f"corr_{uuid.uuid4().hex}"


def _std_error(
    *,
    code: str,
    message: str,
    correlation_id: str,
    http_status: int,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    payload = {
        "code": code,
        "message": message,
        "subErrors": [],
        "timestamp": int(time.time()),
        "correlationId": correlation_id,
    }
    return JSONResponse(
        status_code=http_status,
        content=payload,
        headers={**(headers or {}), CORRELATION_HEADER: correlation_id},
    )


def _intake_error(exc: IntakeError, details: Optional[str] = None) -> JSONResponse:
    body = IntakeErrorResponse(
        error=exc.error,
        error_type=exc.error_type.value,
        message=exc.message,
        details=details,
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def _with_cors(response: Response) -> Response:
    response.headers["Access-Control-Allow-Origin"] = settings.allow_origin
    response.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    response.headers["Vary"] = "Origin"
    return response


def _sheet_response(http_status: int, *, error: Optional[str] = None) -> Response:
    body = SheetAppendResponse(ok=error is None, error=error)
    return _with_cors(JSONResponse(status_code=http_status, content=body.model_dump(exclude_none=True)))


def _decode_json_body(raw: bytes) -> Any:
    if not raw or not raw.strip():
        return {}
    return json.loads(raw)


# -------------------------------------------------------------------
# Middleware
# -------------------------------------------------------------------
@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    correlation_id = _get_or_create_correlation_id(request)
    request.state.correlation_id = correlation_id
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id, path=request.url.path)

    response = await call_next(request)
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


# -------------------------------------------------------------------
# Exception handlers
# -------------------------------------------------------------------
@app.exception_handler(IntakeError)
async def intake_error_handler(request: Request, exc: IntakeError):
    logger.info("resume_intake_rejected", error_type=exc.error_type.value, status_code=exc.http_status)
    return _intake_error(exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    correlation_id = getattr(request.state, "correlation_id", f"corr_{uuid.uuid4().hex}")

    if exc.status_code == 405 and request.url.path == SHEETS_PATH:
        return _sheet_response(405, error="Method not allowed")
    if exc.status_code == 405 and request.url.path == INTAKE_PATH:
        return _intake_error(IntakeError(IntakeErrorType.METHOD_NOT_ALLOWED))

    logger.warning(
        "http_exception",
        correlation_id=correlation_id,
        status_code=exc.status_code,
        detail=str(exc.detail),
    )
    return _std_error(
        code="HTTP_ERROR",
        message=str(exc.detail),
        correlation_id=correlation_id,
        http_status=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------
@app.get("/healthz")
@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": settings.service_name,
        "environment": settings.environment,
    }


@app.post(INTAKE_PATH)
async def analyze_resume(request: Request) -> JSONResponse:
    try:
        upload = await parse_upload_form(request)
        review = await run_in_threadpool(pipeline.run, upload)
        body = IntakeSuccessResponse.model_validate({"form": review})
    except IntakeError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("resume_intake_unexpected_error", error=str(exc))
        return _intake_error(
            IntakeError(IntakeErrorType.INTERNAL_ERROR),
            details=str(exc) if settings.is_development else None,
        )

    return JSONResponse(status_code=200, content=body.model_dump())


@app.options(SHEETS_PATH)
async def sheets_append_preflight() -> Response:
    return _with_cors(Response(status_code=200))


@app.post(SHEETS_PATH)
async def sheets_append(request: Request) -> Response:
    try:
        body = _decode_json_body(await request.body())
        record = flatten(body)
        tab = resolve_target_tab(body, settings.sheet_name, settings.honor_sheet_routing_key)
        await run_in_threadpool(appender.append, record, tab)
    except Exception as exc:  # noqa: BLE001
        # details stay in the logs only
        logger.warning("sheet_append_failed", exception=type(exc).__name__, error=str(exc))
        return _sheet_response(400, error="Bad Request")

    logger.info("sheet_append_succeeded", tab=tab, key_count=len(record))
    return _sheet_response(200)
