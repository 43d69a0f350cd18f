"""Normalize provider reply payloads into text or structured data.

Provider replies arrive as a plain string, a list of content parts, or a single
object. Both entry points here are best-effort: they return an empty result
instead of raising, because callers already fall back at a higher level.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

_NOT_FOUND = object()


def _text_field(part: Any) -> str | None:
    if isinstance(part, Mapping):
        text = part.get("text")
    else:
        text = getattr(part, "text", None)
    return text if isinstance(text, str) else None


def to_text_content(content: Any) -> str:
    """Flatten a reply payload into plain text.

    Args:
        content: String, list of fragments, or an object with a ``text`` field.

    Returns:
        The concatenated text, or an empty string for unknown shapes.
    """
    if not content:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            else:
                parts.append(_text_field(part) or "")
        return "".join(parts)
    return _text_field(content) or ""


@dataclass(frozen=True)
class ParseOutcome:
    """Tagged result of a structured parse: which strategy matched, and the value."""

    strategy: str
    value: Any


def _parse_string(content: Any) -> Any:
    if not isinstance(content, str):
        return _NOT_FOUND
    try:
        return json.loads(content)
    except (json.JSONDecodeError, ValueError):
        return _NOT_FOUND


def _parse_fragments(content: Any) -> Any:
    if not isinstance(content, list):
        return _NOT_FOUND
    for item in content:
        if not isinstance(item, Mapping):
            continue
        if "json" in item:
            return item["json"]
        text = item.get("text")
        if isinstance(text, str):
            try:
                return json.loads(text)
            except (json.JSONDecodeError, ValueError):
                continue
    return _NOT_FOUND


def _parse_object(content: Any) -> Any:
    if isinstance(content, Mapping):
        return dict(content)
    return _NOT_FOUND


PARSE_STRATEGIES: tuple[tuple[str, Callable[[Any], Any]], ...] = (
    ("string", _parse_string),
    ("fragments", _parse_fragments),
    ("object", _parse_object),
)


def parse_structured(content: Any) -> ParseOutcome | None:
    """Try each parse strategy in order and report which one matched."""
    if not content:
        return None
    for name, strategy in PARSE_STRATEGIES:
        value = strategy(content)
        if value is not _NOT_FOUND:
            return ParseOutcome(strategy=name, value=value)
    logger.debug("No parse strategy matched content of type %s", type(content).__name__)
    return None


def parse_json_content(content: Any) -> Any | None:
    """Parse a reply payload as structured data, or return None."""
    outcome = parse_structured(content)
    return outcome.value if outcome is not None else None


def strip_code_fences(text: str) -> str:
    """Remove an enclosing markdown code fence (```json ... ```)."""
    cleaned = text.strip()
    if cleaned[:7].lower() == "```json":
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()
