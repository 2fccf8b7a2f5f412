"""
functions/resume_review/intake_errors.py

Flat error taxonomy for the resume intake handler.

Every failure maps to exactly one IntakeErrorType; the table below fixes
its HTTP status and the public `error` / `message` strings. api.py turns
an IntakeError into the `{error, errorType, message}` body.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, NamedTuple, Optional


class IntakeErrorType(str, Enum):
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    INVALID_PASSKEY = "INVALID_PASSKEY"
    NO_FILE = "NO_FILE"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    PDF_EXTRACTION_FAILED = "PDF_EXTRACTION_FAILED"
    INSUFFICIENT_TEXT = "INSUFFICIENT_TEXT"
    AI_CONFIG_ERROR = "AI_CONFIG_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    AI_ANALYSIS_FAILED = "AI_ANALYSIS_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorEntry(NamedTuple):
    http_status: int
    error: str
    message: str


ERROR_TABLE: Dict[IntakeErrorType, ErrorEntry] = {
    IntakeErrorType.METHOD_NOT_ALLOWED: ErrorEntry(
        405, "Method not allowed", "Only POST requests are supported"
    ),
    IntakeErrorType.INVALID_PASSKEY: ErrorEntry(
        401,
        "Invalid passkey",
        "The provided passkey is incorrect. Please contact admin for access.",
    ),
    IntakeErrorType.NO_FILE: ErrorEntry(400, "No file uploaded", "Please select a PDF file to upload"),
    IntakeErrorType.INVALID_FILE_TYPE: ErrorEntry(
        400,
        "Only PDF files are allowed",
        "Please upload a PDF file. Other file types are not supported.",
    ),
    IntakeErrorType.FILE_TOO_LARGE: ErrorEntry(
        400,
        "File size must be less than 5MB",
        "File size exceeds 5MB limit. Please upload a smaller file.",
    ),
    IntakeErrorType.PDF_EXTRACTION_FAILED: ErrorEntry(
        400,
        "Failed to extract text from PDF",
        "Unable to read the PDF file. The file may be corrupted or password-protected.",
    ),
    IntakeErrorType.INSUFFICIENT_TEXT: ErrorEntry(
        400,
        "Could not extract text from PDF or text too short",
        "The PDF appears to be empty or contains insufficient text to analyze. "
        "Please ensure the resume has readable text content.",
    ),
    IntakeErrorType.AI_CONFIG_ERROR: ErrorEntry(
        500,
        "AI service configuration error",
        "The AI analysis service is not properly configured. Please contact the administrator.",
    ),
    IntakeErrorType.RATE_LIMIT: ErrorEntry(
        429, "Rate limit exceeded", "Too many requests. Please try again in a few minutes."
    ),
    IntakeErrorType.AI_ANALYSIS_FAILED: ErrorEntry(
        500,
        "AI analysis failed",
        "Failed to analyze the resume. Please try again or contact support if the issue persists.",
    ),
    IntakeErrorType.INTERNAL_ERROR: ErrorEntry(
        500,
        "Internal server error",
        "An unexpected error occurred. Please try again later.",
    ),
}


class IntakeError(Exception):
    """A resume intake failure with a single public error kind."""

    def __init__(self, error_type: IntakeErrorType, *, message: Optional[str] = None) -> None:
        entry = ERROR_TABLE[error_type]
        self.error_type = error_type
        self.http_status = entry.http_status
        self.error = entry.error
        self.message = message or entry.message
        super().__init__(f"{error_type.value}: {self.message}")
