"""Data models for the Tailoring module.

Contains Pydantic models for:
- RewriteRequest: Template, instructions, and target job description
- RewriteReply: Raw, cleaned, and merged rewrite output
- ScoreResult: Bounded ATS and interview-likelihood scores
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RewriteInputError(ValueError):
    """Raised when a rewrite request is missing required text."""


class RewriteRequest(BaseModel):
    """A request to tailor a LaTeX template to a job description."""

    model_config = ConfigDict(frozen=True)

    template: str = Field(..., description="LaTeX resume template")
    instructions: str = Field(..., description="Tailoring instructions")
    job_description: str = Field(..., description="Target job description text")

    def validate_inputs(self) -> None:
        """Reject blank fields before any provider call.

        Raises:
            RewriteInputError: If a required field is blank.
        """
        if not self.job_description.strip():
            raise RewriteInputError("Please provide a job description.")
        if not self.template.strip():
            raise RewriteInputError("Please provide a resume LaTeX template.")
        if not self.instructions.strip():
            raise RewriteInputError("Please provide tailoring instructions.")

    def with_extra_instructions(self, extra: str) -> RewriteRequest:
        """Return a new request with ``extra`` appended to the instructions."""
        if not extra.strip():
            return self
        return self.model_copy(
            update={"instructions": "\n\n".join([self.instructions, extra])}
        )


class RewriteReply(BaseModel):
    """Output of a rewrite; only ``merged_document`` is persisted downstream."""

    raw_text: str = Field(default="", description="Flattened provider reply")
    cleaned_text: str = Field(default="", description="Reply with output markers removed")
    merged_document: str = Field(..., description="Template with the window replaced")


class ScoreResult(BaseModel):
    """ATS and interview-likelihood scores; each score/reason pair may be absent."""

    ats_score: float | None = Field(default=None, ge=0, le=100)
    ats_reason: str | None = None
    interview_score: float | None = Field(default=None, ge=0, le=100)
    interview_reason: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.ats_score is None and self.interview_score is None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return self.model_dump(mode="json")
