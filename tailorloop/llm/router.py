"""Completion routing with a single fallback hop.

Every language-model call in tailorloop goes through CompletionRouter.issue:
the primary provider is called first, and on failure the secondary is tried
once. There is no backoff and no further retry.
"""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass, field
from typing import Any

from litellm import AuthenticationError, acompletion

from tailorloop.llm.config import Envelope, LLMConfig, ProviderSpec, get_llm_config
from tailorloop.llm.normalizer import to_text_content

logger = logging.getLogger(__name__)

warnings.filterwarnings(
    "ignore",
    message=r"(?s)^Pydantic serializer warnings:.*",
    category=UserWarning,
)

# LiteLLM loads `.env` into the process environment in DEV mode.
os.environ.setdefault("LITELLM_MODE", "PRODUCTION")

HTTP_UNAUTHORIZED = 401


class CompletionError(Exception):
    """Raised when both the primary and the fallback provider fail."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: str = "",
        auth_failed: bool = False,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.details = details
        self.auth_failed = auth_failed
        self.original_error = original_error


@dataclass(frozen=True)
class CompletionRequest:
    """A provider-neutral completion request.

    ``turns`` are user messages in order. How they are packed into a request
    depends on the target provider's envelope.
    """

    turns: tuple[str, ...]
    system: str | None = None
    max_tokens: int | None = None
    temperature: float | None = None
    response_format: dict[str, Any] | None = None


@dataclass
class CompletionReply:
    """Successful completion: raw message content plus its flattened text."""

    content: Any
    text: str
    provider: ProviderSpec


@dataclass
class ProviderFailure:
    """One failed provider call."""

    provider: ProviderSpec
    status_code: int | None
    body: str
    error: Exception | None = field(default=None, repr=False)

    @property
    def auth_failed(self) -> bool:
        return self.status_code == HTTP_UNAUTHORIZED or isinstance(
            self.error, AuthenticationError
        )


def build_messages(provider: ProviderSpec, request: CompletionRequest) -> list[dict]:
    """Pack a request into the message list the provider expects."""
    if provider.envelope is Envelope.SINGLE_TURN:
        parts = [part for part in (request.system, *request.turns) if part]
        return [
            {
                "role": "user",
                "content": [{"type": "text", "text": "\n\n".join(parts)}],
            }
        ]

    messages: list[dict] = []
    if request.system:
        messages.append({"role": "system", "content": request.system})
    for turn in request.turns:
        messages.append({"role": "user", "content": turn})
    return messages


class CompletionRouter:
    """Issue completions against a primary provider with one fallback hop."""

    def __init__(self, config: LLMConfig | None = None):
        """Initialize the router.

        Args:
            config: Optional LLMConfig. Uses global config if not provided.
        """
        self.config = config or get_llm_config()

    async def issue(
        self,
        primary: ProviderSpec,
        secondary: ProviderSpec | None,
        request: CompletionRequest,
    ) -> CompletionReply:
        """Call ``primary``; on failure call ``secondary`` once.

        Args:
            primary: Provider tried first.
            secondary: Fallback provider, or None for no fallback.
            request: The completion request.

        Returns:
            The first successful CompletionReply.

        Raises:
            CompletionError: If every attempted provider failed.
        """
        outcome = await self._attempt(primary, request)
        if isinstance(outcome, CompletionReply):
            return outcome

        logger.warning("Provider %s failed: %s", primary.label, outcome.body)
        failures = [outcome]

        if secondary is not None:
            fallback = await self._attempt(secondary, request)
            if isinstance(fallback, CompletionReply):
                return fallback
            logger.warning("Fallback provider %s failed: %s", secondary.label, fallback.body)
            failures.append(fallback)

        raise self._unified_error(failures)

    async def _attempt(
        self, provider: ProviderSpec, request: CompletionRequest
    ) -> CompletionReply | ProviderFailure:
        try:
            response = await self._call_completion(provider, request)
        except Exception as e:
            return ProviderFailure(
                provider=provider,
                status_code=getattr(e, "status_code", None),
                body=str(e),
                error=e,
            )

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ProviderFailure(
                provider=provider,
                status_code=None,
                body="Provider returned no choices.",
            )

        message = choices[0].message
        content = getattr(message, "content", None)
        return CompletionReply(
            content=content,
            text=to_text_content(content),
            provider=provider,
        )

    async def _call_completion(self, provider: ProviderSpec, request: CompletionRequest):
        """Make the actual LiteLLM call."""
        kwargs: dict[str, Any] = {
            "model": provider.model,
            "messages": build_messages(provider, request),
            "timeout": self.config.timeout,
        }
        if request.max_tokens is not None:
            kwargs["max_tokens"] = request.max_tokens
        if request.temperature is not None:
            kwargs["temperature"] = request.temperature
        if request.response_format is not None:
            kwargs["response_format"] = request.response_format
        if provider.api_key:
            kwargs["api_key"] = provider.api_key
        if provider.base_url:
            kwargs["base_url"] = provider.base_url

        return await acompletion(**kwargs)

    @staticmethod
    def _unified_error(failures: list[ProviderFailure]) -> CompletionError:
        last = failures[-1]
        status = last.status_code
        if status is None:
            status = next(
                (f.status_code for f in failures if f.status_code is not None), None
            )

        details = next(
            (f.body for f in reversed(failures) if f.body), "Unknown provider error."
        )
        auth_failed = status == HTTP_UNAUTHORIZED or last.auth_failed
        if auth_failed:
            message = (
                f"Authentication failed for provider {last.provider.label}. "
                "Check the API key."
            )
        else:
            message = "Completion request failed."

        return CompletionError(
            message,
            status_code=status,
            details=details,
            auth_failed=auth_failed,
            original_error=last.error,
        )
