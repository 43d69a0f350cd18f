"""Language-model access: provider configuration, routing, reply normalization."""

from tailorloop.llm.config import (
    Envelope,
    LLMConfig,
    ProviderRole,
    ProviderSpec,
    get_llm_config,
    reset_llm_config,
)
from tailorloop.llm.normalizer import (
    ParseOutcome,
    parse_json_content,
    parse_structured,
    strip_code_fences,
    to_text_content,
)
from tailorloop.llm.router import (
    CompletionError,
    CompletionReply,
    CompletionRequest,
    CompletionRouter,
)

__all__ = [
    "CompletionRouter",
    "CompletionRequest",
    "CompletionReply",
    "CompletionError",
    "LLMConfig",
    "ProviderRole",
    "ProviderSpec",
    "Envelope",
    "get_llm_config",
    "reset_llm_config",
    "to_text_content",
    "parse_json_content",
    "parse_structured",
    "strip_code_fences",
    "ParseOutcome",
]
