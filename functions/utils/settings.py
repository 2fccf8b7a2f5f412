"""
functions/utils/settings.py

WHAT THIS FILE IS FOR
---------------------
This module defines the *single source of truth* for runtime configuration
of the Resume Review & Sheet Append API.

It is responsible for:
- Defining all supported configuration fields (via Pydantic BaseSettings)
- Loading default values from parameters/parameters.yaml
- Overriding defaults with environment variables (RESUME_API_*)
- Warning about handler-specific settings that are missing
- Exposing a cached, fully-validated Settings object to the application

LOAD & PRECEDENCE MODEL
-----------------------
Configuration is loaded in the following order (last wins):

1) YAML defaults from:
       parameters/parameters.yaml
2) Environment variables:
       RESUME_API_*

Secrets (passkey, OpenAI key, Google service-account key) are expected
to come from the environment, never from the YAML file.

MISSING SETTINGS
----------------
The two handlers are independent, so a missing setting for one of them
must not take the other one down. Missing values are logged at startup
and surface per request:
- resume_passkey unset        -> every upload rejected (INVALID_PASSKEY)
- openai_api_key unset        -> SDK falls back to OPENAI_API_KEY, else AI_CONFIG_ERROR
- sheet_id / google_* unset   -> sheet appends answer 400 Bad Request

WHAT THIS FILE IS NOT FOR
-------------------------
This module is NOT responsible for:
- Business logic
- Calls to the completion service or the spreadsheet backend
- Request handling

It should only define *configuration structure and loading rules*.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from functions.utils.yaml_loader import load_yaml_mapping

logger = structlog.get_logger(__name__)

PARAMETERS_PATH = Path(__file__).resolve().parents[2] / "parameters" / "parameters.yaml"

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


class Settings(BaseSettings):
    """
    Runtime settings for the Resume Review & Sheet Append API.

    Load order / precedence:
        1) YAML defaults (parameters/parameters.yaml)
        2) Environment variables (RESUME_API_*), overriding YAML
    """

    model_config = SettingsConfigDict(
        env_prefix="RESUME_API_",
        extra="ignore",
    )

    # Service metadata
    service_name: str = "resume_review_api"
    environment: str = "local"
    log_level: str = "INFO"

    # Resume intake
    resume_passkey: Optional[SecretStr] = Field(
        default=None,
        description="Shared secret every resume upload must present in the `passkey` form field.",
    )
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, gt=0)
    min_resume_text_chars: int = Field(default=100, ge=0)

    # Completion service
    openai_api_key: Optional[SecretStr] = None
    openai_model: str = "gpt-5"
    openai_timeout_seconds: float = 180.0

    # Spreadsheet backend
    google_client_email: Optional[str] = None
    google_private_key: Optional[SecretStr] = None
    sheet_id: Optional[str] = None
    sheet_name: str = "Sheet1"
    honor_sheet_routing_key: bool = Field(
        default=True,
        description="If true, a string `_sheet` key in the JSON body selects the target tab.",
    )

    # CORS for the sheet append handler
    allow_origin: str = "*"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in {"development", "dev"}


def _load_yaml_parameters() -> Dict[str, Any]:
    """Base configuration from parameters/parameters.yaml (read once per process)."""
    return load_yaml_mapping(PARAMETERS_PATH)


def _warn_missing(settings: Settings) -> None:
    missing_intake = []
    if settings.resume_passkey is None:
        missing_intake.append("resume_passkey")

    missing_sheets = [
        name
        for name in ("sheet_id", "google_client_email", "google_private_key")
        if getattr(settings, name) is None
    ]

    if missing_intake:
        logger.warning("settings_missing_intake", missing=missing_intake)
    if missing_sheets:
        logger.warning("settings_missing_sheets", missing=missing_sheets)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Construct and return the final validated Settings object.

    This function is cached (singleton per process) and is the ONLY
    supported way to access runtime settings.
    """
    # 1) YAML defaults
    yaml_data = _load_yaml_parameters()

    # 2) env overrides (partial)
    try:
        env_settings = Settings()
        env_data = env_settings.model_dump(exclude_unset=True)
        logger.info("settings_loaded_env_only_partial", fields=list(env_data.keys()))
    except ValidationError as exc:
        logger.warning("settings_env_validation_error", errors=exc.errors())
        env_data = {}

    # 3) merge + final validation
    merged: Dict[str, Any] = {**yaml_data, **env_data}
    settings = Settings.model_validate(merged)

    _warn_missing(settings)

    logger.info(
        "settings_loaded",
        environment=settings.environment,
        service_name=settings.service_name,
        openai_model=settings.openai_model,
        openai_timeout_seconds=settings.openai_timeout_seconds,
        max_upload_bytes=settings.max_upload_bytes,
        min_resume_text_chars=settings.min_resume_text_chars,
        sheet_name=settings.sheet_name,
        honor_sheet_routing_key=settings.honor_sheet_routing_key,
        allow_origin=settings.allow_origin,
    )

    return settings
