"""
functions/resume_review/intake_pipeline.py

WHAT THIS FILE IS FOR
---------------------
Runs one parsed resume upload through the intake gates and returns the
merged review. Each gate either passes or raises IntakeError; the first
failure ends the request.

GATES (in order)
----------------
1) passkey matches the configured secret (constant-time)  INVALID_PASSKEY
2) a file part with a filename is present                 NO_FILE
3) filename ends with ".pdf" (any case)                   INVALID_FILE_TYPE
4) file size <= max_upload_bytes                          FILE_TOO_LARGE
5) PDF text extraction succeeds                           PDF_EXTRACTION_FAILED
6) extracted text has >= min_resume_text_chars            INSUFFICIENT_TEXT
7) completion service returns a conforming review         AI_* / RATE_LIMIT
8) student_name / student_email backfilled from the form
   only where the model left them empty

Extraction and analysis are injected, so tests can assert that a request
rejected early never reaches them.
"""

from __future__ import annotations

import secrets
from typing import Any, Callable, Dict

import structlog

from functions.resume_review.intake_errors import IntakeError, IntakeErrorType
from functions.resume_review.pdf_text_extractor import PdfExtractionError, extract_pdf_text
from functions.resume_review.upload_form import UploadForm
from functions.utils.settings import Settings
from schemas.review_form_schema import ResumeReviewForm

logger = structlog.get_logger(__name__)

BACKFILL_FIELDS = ("student_name", "student_email")


class ResumeIntakePipeline:
    def __init__(
        self,
        settings: Settings,
        *,
        analyze: Callable[[str], ResumeReviewForm],
        extract_text: Callable[[bytes], str] = extract_pdf_text,
    ) -> None:
        self.settings = settings
        self._analyze = analyze
        self._extract_text = extract_text

    def run(self, upload: UploadForm) -> Dict[str, Any]:
        self._check_passkey(upload.get("passkey"))
        data = self._check_file(upload)

        try:
            text = self._extract_text(data)
        except PdfExtractionError as exc:
            raise IntakeError(IntakeErrorType.PDF_EXTRACTION_FAILED) from exc

        if not text or len(text) < self.settings.min_resume_text_chars:
            logger.info("resume_text_insufficient", char_count=len(text or ""))
            raise IntakeError(IntakeErrorType.INSUFFICIENT_TEXT)

        review = self._analyze(text).model_dump()

        for name in BACKFILL_FIELDS:
            provided = upload.get(name)
            if provided and not review.get(name):
                review[name] = provided

        return review

    # ------------------------------------------------------------------ #
    # Gates
    # ------------------------------------------------------------------ #
    def _check_passkey(self, passkey: str | None) -> None:
        expected = self.settings.resume_passkey
        if not passkey or expected is None:
            raise IntakeError(IntakeErrorType.INVALID_PASSKEY)

        if not secrets.compare_digest(passkey.encode("utf-8"), expected.get_secret_value().encode("utf-8")):
            logger.info("resume_passkey_rejected")
            raise IntakeError(IntakeErrorType.INVALID_PASSKEY)

    def _check_file(self, upload: UploadForm) -> bytes:
        if not upload.file_bytes or not upload.filename:
            raise IntakeError(IntakeErrorType.NO_FILE)

        if not upload.filename.lower().endswith(".pdf"):
            raise IntakeError(IntakeErrorType.INVALID_FILE_TYPE)

        limit = self.settings.max_upload_bytes
        if len(upload.file_bytes) > limit:
            logger.info("resume_file_too_large", size=len(upload.file_bytes), limit=limit)
            raise IntakeError(
                IntakeErrorType.FILE_TOO_LARGE,
                message=f"File size exceeds {limit / (1024 * 1024):g}MB limit. Please upload a smaller file.",
            )

        return upload.file_bytes
