"""Configuration for language-model providers.

Three provider roles are configured: the general primary, its secondary
(fallback), and a tertiary provider from a different family used by one review
stage. Settings are read from environment variables prefixed with ``LLM_``; the
API keys also fall back to the providers' conventional ``OPENAI_API_KEY`` and
``ANTHROPIC_API_KEY`` variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderRole(str, Enum):
    """Which configured provider a call is routed to."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"


class Envelope(str, Enum):
    """Request envelope a provider expects."""

    CHAT = "chat"
    SINGLE_TURN = "single_turn"


@dataclass(frozen=True)
class ProviderSpec:
    """A concrete provider endpoint resolved from configuration."""

    role: ProviderRole
    model: str
    envelope: Envelope = Envelope.CHAT
    api_key: str | None = None
    base_url: str | None = None

    @property
    def label(self) -> str:
        return f"{self.role.value}:{self.model}"


class LLMConfig(BaseSettings):
    """Provider configuration.

    Example: LLM_PRIMARY_MODEL=gpt-4.1 LLM_TERTIARY_MODEL=anthropic/claude-3-5-sonnet-20241022
    """

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    primary_model: str = Field(
        default="gpt-4.1",
        description="Model for rewrites, scoring, and most review stages",
    )
    secondary_model: str = Field(
        default="gpt-4o-mini",
        description="Fallback model, also used directly by the ATS review stage",
    )
    tertiary_model: str = Field(
        default="anthropic/claude-3-5-sonnet-20241022",
        description="Model from a distinct provider family (behavioral review stage)",
    )
    openai_api_key: str | None = Field(
        default=None,
        description="API key for the primary/secondary provider",
    )
    anthropic_api_key: str | None = Field(
        default=None,
        description="API key for the tertiary provider",
    )
    base_url: str | None = Field(
        default=None,
        description="Base URL for an OpenAI-compatible endpoint (primary/secondary)",
    )
    timeout: Annotated[float, Field(gt=0)] = Field(
        default=180.0,
        description="Timeout in seconds for a single provider call",
    )

    @model_validator(mode="after")
    def apply_conventional_keys(self) -> LLMConfig:
        """Fall back to the providers' conventional API key variables."""
        if self.openai_api_key is None:
            self.openai_api_key = os.getenv("OPENAI_API_KEY") or None
        if self.anthropic_api_key is None:
            self.anthropic_api_key = os.getenv("ANTHROPIC_API_KEY") or None
        return self

    def provider(self, role: ProviderRole) -> ProviderSpec:
        """Resolve a provider role into a concrete ProviderSpec."""
        if role is ProviderRole.TERTIARY:
            model = self.tertiary_model
            if "/" not in model:
                model = f"anthropic/{model}"
            return ProviderSpec(
                role=role,
                model=model,
                envelope=Envelope.SINGLE_TURN,
                api_key=self.anthropic_api_key,
            )

        model = self.primary_model if role is ProviderRole.PRIMARY else self.secondary_model
        if self.base_url and "/" not in model:
            # Route custom endpoints through LiteLLM's OpenAI-compatible client
            model = f"openai/{model}"
        return ProviderSpec(
            role=role,
            model=model,
            envelope=Envelope.CHAT,
            api_key=self.openai_api_key,
            base_url=self.base_url,
        )


# Singleton instance
_llm_config: LLMConfig | None = None


def get_llm_config() -> LLMConfig:
    """Get the provider configuration singleton."""
    global _llm_config
    if _llm_config is None:
        _llm_config = LLMConfig()
    return _llm_config


def reset_llm_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _llm_config
    _llm_config = None
