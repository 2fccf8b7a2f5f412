"""
functions/resume_review/upload_form.py

Reads a multipart/form-data resume upload into an UploadForm.

Parsing is lenient: a body that is not valid multipart (missing
boundary, wrong content type, truncated parts) yields an empty form
rather than an exception, and the validation gates in intake_pipeline.py
decide what to report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

import structlog
from fastapi import Request
from starlette.datastructures import UploadFile

logger = structlog.get_logger(__name__)


@dataclass
class UploadForm:
    fields: Dict[str, str] = field(default_factory=dict)
    file_bytes: Optional[bytes] = None
    filename: Optional[str] = None

    def get(self, name: str) -> Optional[str]:
        value = self.fields.get(name)
        return value if value else None


async def parse_upload_form(request: Request) -> UploadForm:
    """
    Collect string fields (trimmed) and the first file part.

    Starlette enforces its own per-request part limits; anything it cannot
    parse is logged and dropped.
    """
    upload = UploadForm()

    try:
        form = await request.form()
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "upload_form_parse_failed",
            content_type=request.headers.get("content-type"),
            error=str(exc),
        )
        return upload

    try:
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                if upload.file_bytes is None and value.filename:
                    upload.file_bytes = await value.read()
                    upload.filename = value.filename
                continue
            upload.fields[name] = value.strip()
    finally:
        await form.close()

    logger.info(
        "upload_form_parsed",
        field_names=sorted(upload.fields),
        has_file=upload.file_bytes is not None,
        file_size=len(upload.file_bytes) if upload.file_bytes is not None else 0,
    )
    return upload
