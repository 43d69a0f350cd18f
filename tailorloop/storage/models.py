"""Data models for the profile and application store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, Field

DEFAULT_STATUS = "Applied"


class Profile(BaseModel):
    """The single user profile: templates, instructions and output names."""

    resume_template: str = ""
    cover_letter_template: str = ""
    instructions: str = ""
    cover_letter_instructions: str = ""
    resume_file_name: str = ""
    cover_letter_file_name: str = ""
    current_platform: str = ""

    @property
    def is_empty(self) -> bool:
        """True when no field carries user content."""
        return not any(value.strip() for value in self.model_dump().values())


class LocalCache(BaseModel):
    """Contents of the local JSON cache."""

    profile: Profile = Field(default_factory=Profile)
    stage_prompts: dict[str, str] = Field(default_factory=dict)


@dataclass
class Application:
    """A job application saved after tailoring.

    Attributes:
        company: Company name.
        status: Free-form status label.
        platform: Where the application was submitted.
        resume_latex: Final merged resume document.
        cover_letter: Cover letter text, if any.
        job_description: Job description the resume was tailored to.
        ats_score: ATS score reported for the resume.
        interview_score: Interview likelihood reported for the resume.
        id: Row id, set once persisted.
        created_at: Creation time.
    """

    company: str
    status: str = DEFAULT_STATUS
    platform: str = ""
    resume_latex: str = ""
    cover_letter: str = ""
    job_description: str = ""
    ats_score: float | None = None
    interview_score: float | None = None
    id: int | None = None
    created_at: datetime = field(default_factory=datetime.now)
