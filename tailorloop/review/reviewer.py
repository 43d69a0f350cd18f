"""Single-stage reviewer.

Builds the stage instruction, routes it to the stage's provider with its
fallback, and parses the reply into a StageResult.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from tailorloop.llm.config import LLMConfig, get_llm_config
from tailorloop.llm.router import CompletionError, CompletionRequest, CompletionRouter
from tailorloop.review.config import ReviewConfig, get_review_config
from tailorloop.review.models import Stage, StageRecord, StageResult
from tailorloop.review.parser import parse_stage_reply
from tailorloop.review.stages import FALLBACK_ROLES, build_instruction, get_definition

logger = logging.getLogger(__name__)


class ReviewInputError(ValueError):
    """Raised when a review is requested without a job description or resume."""


def build_review_turn(job_description: str, resume: str) -> str:
    """User turn carrying the job description and the resume text."""
    return "\n".join(["JOB DESCRIPTION:", job_description, "", "RESUME:", resume])


class StageReviewer:
    """Runs one review stage against a job description and resume."""

    def __init__(
        self,
        router: CompletionRouter | None = None,
        config: ReviewConfig | None = None,
        llm_config: LLMConfig | None = None,
    ):
        """Initialize the reviewer.

        Args:
            router: Optional CompletionRouter.
            config: Optional ReviewConfig. Uses global config if not provided.
            llm_config: Optional LLMConfig. Uses global config if not provided.
        """
        self.config = config or get_review_config()
        self.llm_config = llm_config or get_llm_config()
        self.router = router or CompletionRouter(config=self.llm_config)

    async def review(
        self,
        stage: Stage,
        job_description: str,
        resume: str,
        overrides: Mapping[Stage | str, str] | None = None,
    ) -> StageResult:
        """Review ``resume`` for one stage.

        Args:
            stage: The stage to run.
            job_description: Target job description text.
            resume: Plain-text resume.
            overrides: Per-stage instruction overrides; falls back to the
                configured overrides, then the stage default.

        Returns:
            The parsed StageResult (a single concern pair if unparseable).

        Raises:
            ReviewInputError: If the job description or resume is blank.
            CompletionError: If the stage provider and its fallback both fail.
        """
        if not job_description.strip() or not resume.strip():
            raise ReviewInputError("Both job description and resume are required.")

        definition = get_definition(stage)
        instruction = build_instruction(stage, overrides or self.config.stage_prompts)
        request = CompletionRequest(
            system=instruction,
            turns=(build_review_turn(job_description, resume),),
            max_tokens=self.config.max_tokens,
        )

        reply = await self.router.issue(
            self.llm_config.provider(definition.provider),
            self.llm_config.provider(FALLBACK_ROLES[definition.provider]),
            request,
        )

        parsed = parse_stage_reply(reply.text)
        logger.info(
            f"Stage {stage.value} reviewed by {reply.provider.label}: "
            f"{parsed.result.status} ({len(parsed.result.pairs)} pairs, "
            f"strategy={parsed.strategy})"
        )
        return parsed.result

    async def run(
        self,
        record: StageRecord,
        job_description: str,
        resume: str,
        overrides: Mapping[Stage | str, str] | None = None,
    ) -> StageRecord:
        """Drive ``record`` from loading to resolved or failed.

        A failed record keeps its previously resolved result.
        """
        try:
            result = await self.review(record.stage, job_description, resume, overrides)
        except ReviewInputError as e:
            return record.fail(str(e))
        except CompletionError as e:
            logger.error(f"Stage {record.stage.value} review failed: {e} {e.details}")
            return record.fail(str(e))
        return record.resolve(result)
