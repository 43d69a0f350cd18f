"""Configuration settings for the Tailoring module."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TailoringConfig(BaseSettings):
    """Configuration for rewrites, scoring, and cover letters.

    Settings can be overridden via environment variables prefixed with TAILORING_.

    Example: TAILORING_REWRITE_MAX_TOKENS=6000
    """

    model_config = SettingsConfigDict(
        env_prefix="TAILORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    temperature: Annotated[float, Field(ge=0.0, le=2.0)] = Field(
        default=0.0,
        description="Sampling temperature for rewrite and scoring calls",
    )
    rewrite_max_tokens: Annotated[int, Field(gt=0)] = Field(
        default=4000,
        description="Token limit for the resume rewrite call",
    )
    score_max_tokens: Annotated[int, Field(gt=0)] = Field(
        default=400,
        description="Token limit for the ATS/interview scoring call",
    )
    cover_letter_max_tokens: Annotated[int, Field(gt=0)] = Field(
        default=4000,
        description="Token limit for the cover letter call",
    )
    include_length_policy: bool = Field(
        default=True,
        description="Append the one-page length policy to tailoring instructions",
    )


# Singleton instance
_tailoring_config: TailoringConfig | None = None


def get_tailoring_config() -> TailoringConfig:
    """Get the tailoring configuration singleton."""
    global _tailoring_config
    if _tailoring_config is None:
        _tailoring_config = TailoringConfig()
    return _tailoring_config


def reset_tailoring_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _tailoring_config
    _tailoring_config = None
