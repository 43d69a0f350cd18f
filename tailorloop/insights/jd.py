"""Rule-based job description insights.

Pulls out the skills/requirements block, salary figures, and clearance and
H-1B sponsorship signals without any model call.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field

SKILL_SECTIONS = ("skills", "requirements", "qualifications")

_SALARY_RE = re.compile(r"\$[\d,]+(?:\s*[-–]\s*\$?[\d,]+)?")


class JobInsights(BaseModel):
    """Quick facts extracted from a job description."""

    skills_text: str = Field(default="", description="Skills/requirements block")
    skills_chars: int = Field(default=0, ge=0, description="Length of skills_text")
    salary: str = Field(default="not mentioned", description="Salary figures found")
    clearance: Literal["yes", "no", "not mentioned"] = "not mentioned"
    h1b: Literal["yes", "no", "not specified"] = "not specified"


def extract_skills(text: str) -> str:
    """Return the first skills/requirements/qualifications block."""
    for section in SKILL_SECTIONS:
        match = re.search(
            rf"{section}[\s\S]*?(?=\n[A-Z][^\n]*:|$)", text, flags=re.IGNORECASE
        )
        if match:
            return match.group(0).strip()
    return ""


def extract_salary(text: str) -> str:
    matches = _SALARY_RE.findall(text)
    return " / ".join(matches) if matches else "not mentioned"


def extract_clearance(text: str) -> Literal["yes", "no", "not mentioned"]:
    lower = text.lower()
    if "clearance" in lower or "ts/sci" in lower or "secret" in lower:
        return "yes"
    return "not mentioned"


def extract_h1b(text: str) -> Literal["yes", "no", "not specified"]:
    lower = text.lower()
    if "h1b" in lower or "h-1b" in lower or "visa sponsorship" in lower:
        if "no sponsor" in lower or "no sponsorship" in lower:
            return "no"
        return "yes"
    if "work authorization" in lower and (
        "no sponsorship" in lower or "cannot sponsor" in lower
    ):
        return "no"
    return "not specified"


def extract_insights(job_description: str) -> JobInsights:
    """Extract all insights from a job description.

    Raises:
        ValueError: If the job description is blank.
    """
    if not job_description.strip():
        raise ValueError("Please provide a job description.")
    skills = extract_skills(job_description)
    return JobInsights(
        skills_text=skills,
        skills_chars=len(skills),
        salary=extract_salary(job_description),
        clearance=extract_clearance(job_description),
        h1b=extract_h1b(job_description),
    )
