"""Configuration settings for the Review module."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tailorloop.review.models import Stage


class ReviewConfig(BaseSettings):
    """Configuration for the stage reviewers.

    Settings can be overridden via environment variables prefixed with REVIEW_.
    Per-stage prompt overrides are given as JSON, e.g.
    REVIEW_STAGE_PROMPTS='{"ats": "You are a strict ATS parser..."}'
    """

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    max_tokens: Annotated[int, Field(gt=0)] = Field(
        default=1500,
        description="Token limit for a single stage review reply",
    )
    stage_prompts: dict[str, str] = Field(
        default_factory=dict,
        description="Per-stage instruction overrides keyed by stage key",
    )

    @field_validator("stage_prompts")
    @classmethod
    def validate_stage_keys(cls, v: dict[str, str]) -> dict[str, str]:
        """Reject overrides for unknown stages."""
        known = {stage.value for stage in Stage}
        unknown = sorted(set(v) - known)
        if unknown:
            raise ValueError(f"Unknown review stages: {unknown}. Must be among {sorted(known)}")
        return v


# Singleton instance
_review_config: ReviewConfig | None = None


def get_review_config() -> ReviewConfig:
    """Get the review configuration singleton."""
    global _review_config
    if _review_config is None:
        _review_config = ReviewConfig()
    return _review_config


def reset_review_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _review_config
    _review_config = None
