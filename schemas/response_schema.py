# -------------------------------------------------------------------
# schemas/response_schema.py
#
# WHAT THIS FILE IS FOR
# --------------------
# Public response bodies of both handlers.
#
# Resume intake:
#   success -> {success: true, form: <ResumeReviewForm>, message}
#   failure -> {error, errorType, message[, details]}
#
# Sheet append:
#   success -> {ok: true}
#   failure -> {ok: false, error}
#
# Keys are emitted exactly as named here (errorType is camelCase on the
# wire, hence the alias). `details` is only set in development mode.
# -------------------------------------------------------------------

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.review_form_schema import ResumeReviewForm


class IntakeSuccessResponse(BaseModel):
    success: bool = True
    form: ResumeReviewForm
    message: str = "Resume analyzed successfully"


class IntakeErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str
    error_type: str = Field(..., alias="errorType")
    message: str
    details: Optional[str] = None


class SheetAppendResponse(BaseModel):
    ok: bool
    error: Optional[str] = None
