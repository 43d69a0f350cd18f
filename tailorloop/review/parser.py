"""Parse stage review replies into StageResults.

Replies are decoded with a fixed sequence of named strategies. When none
applies, the explicit fallback tier turns the cleaned reply text into a single
concern pair, so a stage always has something to display.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from tailorloop.llm.normalizer import strip_code_fences
from tailorloop.review.models import RequirementPair, StageResult, normalize_verdict

logger = logging.getLogger(__name__)

EMPTY_FEEDBACK = "No feedback returned."


@dataclass(frozen=True)
class StageParse:
    """Tagged parse result: the strategy that produced ``result``."""

    strategy: str
    result: StageResult


def _pair_from_item(item: Any, status: str) -> RequirementPair | None:
    if isinstance(item, Mapping):
        return RequirementPair.model_validate(
            {
                "jd": item.get("jd"),
                "resume": item.get("resume"),
                "verdict": item.get("verdict"),
                "reason": item.get("reason"),
            }
        )
    if isinstance(item, str) and item.strip():
        return RequirementPair(jd="", resume=item, verdict=status, reason=item)
    return None


def _from_pairs(payload: Mapping[str, Any], cleaned: str) -> StageResult | None:
    pairs = payload.get("pairs")
    if not isinstance(pairs, list):
        return None
    status = normalize_verdict(payload.get("status"))
    parsed = [p for p in (_pair_from_item(item, status) for item in pairs) if p]
    return StageResult(status=status, pairs=parsed, fix_prompt=payload.get("prompt"))


def _from_bullets(payload: Mapping[str, Any], cleaned: str) -> StageResult | None:
    bullets = payload.get("bullets")
    if not isinstance(bullets, list):
        return None
    status = normalize_verdict(payload.get("status"))
    pairs = [
        RequirementPair(jd="", resume=str(b), verdict=status, reason=str(b))
        for b in bullets
    ]
    return StageResult(status=status, pairs=pairs, fix_prompt=payload.get("prompt"))


def _from_bare_object(payload: Mapping[str, Any], cleaned: str) -> StageResult | None:
    status = normalize_verdict(payload.get("status"))
    pair = RequirementPair(jd="", resume=cleaned, verdict=status, reason=cleaned)
    return StageResult(status=status, pairs=[pair], fix_prompt=payload.get("prompt"))


STAGE_STRATEGIES: tuple[
    tuple[str, Callable[[Mapping[str, Any], str], StageResult | None]], ...
] = (
    ("pairs", _from_pairs),
    ("bullets", _from_bullets),
    ("bare_object", _from_bare_object),
)


def fallback_result(cleaned: str) -> StageResult:
    """Single concern pair carrying the raw reply as evidence and reason."""
    text = cleaned or EMPTY_FEEDBACK
    pair = RequirementPair(jd="", resume=text, verdict="concern", reason=text)
    return StageResult(status="concern", pairs=[pair], fix_prompt="")


def parse_stage_reply(text: str) -> StageParse:
    """Parse a stage reply.

    Args:
        text: Reply text, possibly wrapped in a markdown code fence.

    Returns:
        StageParse naming the matching strategy, or ``fallback``.
    """
    cleaned = strip_code_fences(text or "")
    try:
        payload = json.loads(cleaned)
    except (json.JSONDecodeError, ValueError):
        payload = None

    if isinstance(payload, Mapping):
        for name, strategy in STAGE_STRATEGIES:
            result = strategy(payload, cleaned)
            if result is not None:
                return StageParse(strategy=name, result=result)

    logger.debug("Stage reply was not a JSON object; using fallback result")
    return StageParse(strategy="fallback", result=fallback_result(cleaned))
