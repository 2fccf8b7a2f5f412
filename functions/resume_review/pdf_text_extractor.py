"""
functions/resume_review/pdf_text_extractor.py

Plain-text extraction from PDF bytes, delegated to pypdf.

Pages are joined with newlines and the result is stripped. Corrupt files,
files pypdf cannot parse and password-protected files all raise
PdfExtractionError; the caller maps that to a single public error kind.
"""

from __future__ import annotations

import io

import structlog
from pypdf import PdfReader

logger = structlog.get_logger(__name__)


class PdfExtractionError(RuntimeError):
    """The PDF could not be read."""


def extract_pdf_text(data: bytes) -> str:
    if not data:
        raise PdfExtractionError("empty file")

    try:
        reader = PdfReader(io.BytesIO(data))

        if reader.is_encrypted and not reader.decrypt(""):
            raise PdfExtractionError("PDF is password-protected")

        pages = [page.extract_text() or "" for page in reader.pages]
    except PdfExtractionError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.warning("pdf_extraction_failed", error=str(exc), size=len(data))
        raise PdfExtractionError(str(exc)) from exc

    text = "\n".join(page.strip() for page in pages).strip()
    logger.info("pdf_text_extracted", page_count=len(pages), char_count=len(text))
    return text
