"""
functions/resume_review/prompt_builder.py

WHAT THIS FILE IS FOR
---------------------
Builds the instructional prompt sent to the completion service.

Prompt wording is configuration: it lives in parameters/prompts.yaml
under `resume_review` and is loaded once per process.

    resume_review:
      system:   <system message>
      template: <user message with a {resume_text} placeholder>

A missing file, a missing section or a template without the placeholder
raises PromptConfigError, which the review service reports as an AI
configuration problem.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from functions.utils.yaml_loader import load_yaml_mapping

PROMPTS_PATH = Path(__file__).resolve().parents[2] / "parameters" / "prompts.yaml"
PLACEHOLDER = "{resume_text}"


class PromptConfigError(RuntimeError):
    """The review prompt is missing or malformed."""


def load_prompt_config() -> Dict[str, Any]:
    return load_yaml_mapping(PROMPTS_PATH)


def _review_section() -> Dict[str, Any]:
    section = load_prompt_config().get("resume_review")
    if not isinstance(section, dict):
        raise PromptConfigError("Missing `resume_review` section in prompts.yaml")
    return section


def build_review_prompt(resume_text: str) -> str:
    template = _review_section().get("template")
    if not isinstance(template, str) or PLACEHOLDER not in template:
        raise PromptConfigError(f"resume_review.template must be a string containing {PLACEHOLDER}")
    return template.replace(PLACEHOLDER, resume_text)


def build_review_messages(resume_text: str) -> List[Dict[str, str]]:
    """Chat messages for one review request (system message is optional)."""
    messages: List[Dict[str, str]] = []
    system = _review_section().get("system")
    if isinstance(system, str) and system.strip():
        messages.append({"role": "system", "content": system.strip()})
    messages.append({"role": "user", "content": build_review_prompt(resume_text)})
    return messages
