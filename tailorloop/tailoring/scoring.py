"""ATS and interview-likelihood score extraction.

Scoring is best-effort: any failure yields a ScoreResult with null fields and
never blocks delivery of the rewritten document.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from tailorloop.llm.config import LLMConfig, ProviderRole, get_llm_config
from tailorloop.llm.normalizer import parse_json_content
from tailorloop.llm.router import CompletionError, CompletionRequest, CompletionRouter
from tailorloop.tailoring.config import TailoringConfig, get_tailoring_config
from tailorloop.tailoring.models import ScoreResult
from tailorloop.tailoring.prompts import (
    SCORING_RESPONSE_FORMAT,
    SCORING_SYSTEM_PROMPT,
    build_scoring_turn,
)

logger = logging.getLogger(__name__)

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def clamp_score(value: Any) -> float | None:
    """Clamp a numeric score into [0, 100]; non-numbers yield None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value != value:  # NaN
        return None
    return min(SCORE_MAX, max(SCORE_MIN, float(value)))


def _score_pair(
    payload: Mapping[str, Any], score_key: str, reason_key: str
) -> tuple[float | None, str | None]:
    score = clamp_score(payload.get(score_key))
    if score is None:
        return None, None
    reason = payload.get(reason_key)
    return score, reason if isinstance(reason, str) else None


def scores_from_payload(payload: Any) -> ScoreResult:
    """Build a ScoreResult from a parsed scoring payload.

    The ATS and interview pairs are extracted independently; a missing or
    non-numeric score nulls out only its own pair.
    """
    if not isinstance(payload, Mapping):
        return ScoreResult()

    ats_score, ats_reason = _score_pair(payload, "ats_score", "ats_reason")
    interview_score, interview_reason = _score_pair(
        payload, "interview_score", "interview_reason"
    )
    if ats_score is None or interview_score is None:
        logger.warning("Scoring JSON missing expected numeric fields: %s", dict(payload))

    return ScoreResult(
        ats_score=ats_score,
        ats_reason=ats_reason,
        interview_score=interview_score,
        interview_reason=interview_reason,
    )


class ScoreExtractor:
    """Request schema-constrained scores for a rewritten resume."""

    def __init__(
        self,
        router: CompletionRouter | None = None,
        config: TailoringConfig | None = None,
        llm_config: LLMConfig | None = None,
    ):
        self.config = config or get_tailoring_config()
        self.llm_config = llm_config or get_llm_config()
        self.router = router or CompletionRouter(config=self.llm_config)

    async def extract(self, job_description: str, document: str) -> ScoreResult:
        """Score ``document`` against ``job_description``.

        Args:
            job_description: Target job description text.
            document: The merged LaTeX resume.

        Returns:
            ScoreResult; all fields None when both providers fail.
        """
        request = CompletionRequest(
            system=SCORING_SYSTEM_PROMPT,
            turns=(build_scoring_turn(job_description=job_description, document=document),),
            max_tokens=self.config.score_max_tokens,
            temperature=self.config.temperature,
            response_format=SCORING_RESPONSE_FORMAT,
        )

        try:
            reply = await self.router.issue(
                self.llm_config.provider(ProviderRole.PRIMARY),
                self.llm_config.provider(ProviderRole.SECONDARY),
                request,
            )
        except CompletionError as e:
            logger.warning("Scoring failed on both providers: %s (%s)", e, e.details)
            return ScoreResult()
        except Exception as e:
            logger.warning(f"Error during scoring call: {e}")
            return ScoreResult()

        if not reply.content:
            return ScoreResult()
        return scores_from_payload(parse_json_content(reply.content))
