"""
functions/resume_review/review_service.py

WHAT THIS FILE IS FOR
---------------------
This module defines a *thin, synchronous client* for the completion
service (OpenAI chat completions) that turns extracted resume text into
a ResumeReviewForm.

It is responsible for:
- Building the chat messages (prompt_builder.py)
- Sending the review schema as a `json_schema` response format
- Validating the reply against ResumeReviewForm
- Classifying failures into one public error kind

CALL FLOW CONTEXT
-----------------
FastAPI (api.py)
  -> ResumeIntakePipeline.run()
      -> ResumeReviewService.analyze()
          -> client.chat.completions.create(...)

ERROR HANDLING RULES
--------------------
- Missing key / authentication failure / "API key" errors -> AI_CONFIG_ERROR
- Missing or malformed prompt configuration               -> AI_CONFIG_ERROR
- Rate limiting                                           -> RATE_LIMIT
- Anything else, including a reply that does not match
  the schema, a refusal or an empty reply                 -> AI_ANALYSIS_FAILED

No retries are performed: the SDK is built with max_retries=0.

WHAT THIS FILE IS NOT FOR
-------------------------
- Upload validation or PDF extraction
- HTTP routing and response envelopes
- Logging request/response bodies (only sizes and error strings)
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import openai
import structlog
from pydantic import ValidationError

from functions.resume_review.intake_errors import IntakeError, IntakeErrorType
from functions.resume_review.prompt_builder import PromptConfigError, build_review_messages
from functions.utils.settings import Settings
from schemas.review_form_schema import ResumeReviewForm

logger = structlog.get_logger(__name__)


def review_response_format() -> Dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "resume_review",
            "schema": ResumeReviewForm.model_json_schema(),
            "strict": False,
        },
    }


def classify_completion_error(exc: BaseException) -> IntakeErrorType:
    if isinstance(exc, PromptConfigError):
        return IntakeErrorType.AI_CONFIG_ERROR
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return IntakeErrorType.AI_CONFIG_ERROR
    if isinstance(exc, openai.RateLimitError):
        return IntakeErrorType.RATE_LIMIT

    text = str(exc).lower()
    if "api key" in text or "api_key" in text:
        return IntakeErrorType.AI_CONFIG_ERROR
    if "rate limit" in text:
        return IntakeErrorType.RATE_LIMIT
    return IntakeErrorType.AI_ANALYSIS_FAILED


class ResumeReviewService:
    """
    Completion-service adapter producing a schema-validated review.

    `client` may be injected (tests pass a fake exposing
    `chat.completions.create`). Otherwise an OpenAI client is created on
    first use, so a missing key only fails the requests that need it.
    """

    def __init__(self, settings: Settings, client: Any = None) -> None:
        self.settings = settings
        self._client = client

    def analyze(self, resume_text: str) -> ResumeReviewForm:
        try:
            messages = build_review_messages(resume_text)
            completion = self._get_client().chat.completions.create(
                model=self.settings.openai_model,
                messages=messages,
                response_format=review_response_format(),
            )
            review = self._parse_completion(completion)
        except Exception as exc:  # noqa: BLE001
            error_type = classify_completion_error(exc)
            logger.error(
                "resume_review_failed",
                error_type=error_type.value,
                exception=type(exc).__name__,
                error=str(exc),
            )
            raise IntakeError(error_type) from exc

        logger.info(
            "resume_review_completed",
            model=self.settings.openai_model,
            status=review.status,
            overall=review.overall,
        )
        return review

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _get_client(self) -> Any:
        if self._client is None:
            api_key: Optional[str] = (
                self.settings.openai_api_key.get_secret_value() if self.settings.openai_api_key else None
            )
            timeout = httpx.Timeout(self.settings.openai_timeout_seconds, connect=10.0)
            # raises openai.OpenAIError mentioning api_key when no key is available
            self._client = openai.OpenAI(
                api_key=api_key,
                max_retries=0,
                http_client=httpx.Client(timeout=timeout),
            )
        return self._client

    @staticmethod
    def _parse_completion(completion: Any) -> ResumeReviewForm:
        if not completion.choices:
            raise RuntimeError("Completion returned no choices")

        message = completion.choices[0].message
        refusal = getattr(message, "refusal", None)
        if refusal:
            raise RuntimeError(f"Completion refused: {refusal}")

        content = message.content
        if not content:
            raise RuntimeError("Completion returned empty content")

        try:
            return ResumeReviewForm.model_validate_json(content)
        except ValidationError as exc:
            raise RuntimeError(f"Completion does not match review schema: {exc.error_count()} errors") from exc
