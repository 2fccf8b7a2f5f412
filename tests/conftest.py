# tests/conftest.py
from __future__ import annotations

import copy
from typing import Any, Dict

import pytest

_VALID_REVIEW: Dict[str, Any] = {
    "student_name": "",
    "student_email": "",
    "page_count": "1",
    "presentation": {
        "no_errors": True,
        "links_working": None,
        "links_blue": None,
        "full_lines": True,
        "has_github_link": True,
        "has_coding_platform_link": False,
        "has_linkedin_link": True,
        "has_portfolio_link": False,
        "section_comment": "- Add a LeetCode or Codeforces link in the header",
    },
    "summary": {"concise_score": 4, "problem_open_cp": False, "section_comment": "- Mention open source work"},
    "education": {"highlighted": True, "date_format": True, "section_comment": "- Looks good"},
    "skills": {
        "has_programming_languages": True,
        "has_software_packages": True,
        "has_problem_solving_ds": False,
        "has_soft_skills": False,
        "no_buzzwords": True,
        "section_comment": "- Add DS&A to skills",
    },
    "projects": {
        "project_count": 2,
        "categories": {
            "frontend": False,
            "backend": True,
            "fullstack": True,
            "aiml": False,
            "iot": False,
            "robotics": False,
            "research": False,
            "others": False,
        },
        "others_details": "",
        "ai_generated": None,
        "has_project_names": True,
        "sequence_score": 3,
        "has_links": True,
        "strong_verbs": True,
        "section_comment": "- Describe the problem before the solution",
    },
    "experience": {
        "has_basic_details": True,
        "has_learnings": False,
        "has_outcomes": True,
        "has_soft_skills": False,
        "strong_verbs": True,
        "description_score": 3.5,
        "section_comment": "- Add what you learned",
    },
    "achievements": {
        "mentions_cp": False,
        "mentions_opensource": False,
        "mentions_competitions": True,
        "mentions_volunteering": False,
        "mentions_other": False,
        "overall_score": None,
        "section_comment": "- Add hackathon rankings",
    },
    "certs": {"has_basic_info": True, "links_work": None, "section_comment": "- Fine"},
    "overall": 7,
    "status": "request_changes",
    "comments": "- Solid base, tighten project descriptions",
}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def valid_review() -> Dict[str, Any]:
    return copy.deepcopy(_VALID_REVIEW)
