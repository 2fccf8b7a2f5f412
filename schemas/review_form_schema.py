# -------------------------------------------------------------------
# schemas/review_form_schema.py
#
# WHAT THIS FILE IS FOR
# --------------------
# This module defines the **structured resume review** the completion
# service must return. The same models are used twice:
#
#   1) ResumeReviewForm.model_json_schema() is sent with the completion
#      request as the required output shape
#   2) ResumeReviewForm.model_validate_json() checks the reply; anything
#      that does not conform is a failed call, never a partial result
#
# FIELD CONVENTIONS
# -----------------
# - Names are snake_case and are returned to clients unchanged.
# - Ratings are bounded (1-5 per section, 1-10 overall) and nullable
#   where the value cannot be known from extracted text alone.
# - Booleans that need a rendered document to verify (link colour,
#   working links) are nullable for the same reason.
# - Every section ends with a free-text `section_comment`.
# - Unknown keys are rejected (extra="forbid").
#
# WHAT THIS FILE IS NOT FOR
# ------------------------
# Prompt wording lives in parameters/prompts.yaml. The grading rubric
# itself is configuration, not code.
# -------------------------------------------------------------------

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class PresentationReview(_Section):
    no_errors: bool
    links_working: Optional[bool]
    links_blue: Optional[bool]
    full_lines: bool
    has_github_link: bool
    has_coding_platform_link: bool
    has_linkedin_link: bool
    has_portfolio_link: bool
    section_comment: str


class SummaryReview(_Section):
    concise_score: Optional[float] = Field(..., ge=1, le=5)
    problem_open_cp: bool
    section_comment: str


class EducationReview(_Section):
    highlighted: bool
    date_format: bool
    section_comment: str


class SkillsReview(_Section):
    has_programming_languages: bool
    has_software_packages: bool
    has_problem_solving_ds: bool
    has_soft_skills: bool
    no_buzzwords: bool
    section_comment: str


class ProjectCategories(_Section):
    frontend: bool
    backend: bool
    fullstack: bool
    aiml: bool
    iot: bool
    robotics: bool
    research: bool
    others: bool


class ProjectsReview(_Section):
    project_count: Optional[int] = Field(..., ge=0)
    categories: ProjectCategories
    others_details: str
    ai_generated: Optional[bool]
    has_project_names: bool
    sequence_score: Optional[float] = Field(..., ge=1, le=5)
    has_links: bool
    strong_verbs: bool
    section_comment: str


class ExperienceReview(_Section):
    has_basic_details: bool
    has_learnings: bool
    has_outcomes: bool
    has_soft_skills: bool
    strong_verbs: bool
    description_score: Optional[float] = Field(..., ge=1, le=5)
    section_comment: str


class AchievementsReview(_Section):
    mentions_cp: bool
    mentions_opensource: bool
    mentions_competitions: bool
    mentions_volunteering: bool
    mentions_other: bool
    overall_score: Optional[float] = Field(..., ge=1, le=5)
    section_comment: str


class CertsReview(_Section):
    has_basic_info: bool
    links_work: Optional[bool]
    section_comment: str


class ResumeReviewForm(BaseModel):
    """
    Full review of one resume.

    `student_name` / `student_email` may come back empty; the intake
    pipeline backfills them from the upload form in that case.
    """

    model_config = ConfigDict(
        extra="forbid",
        title="resume_review",
    )

    student_name: str
    student_email: str
    page_count: Literal["1", "2", "3+"]
    presentation: PresentationReview
    summary: SummaryReview
    education: EducationReview
    skills: SkillsReview
    projects: ProjectsReview
    experience: ExperienceReview
    achievements: AchievementsReview
    certs: CertsReview
    overall: Optional[float] = Field(..., ge=1, le=10)
    status: Literal["request_changes", "approved"]
    comments: str
