"""Main Tailoring Service.

Runs the rewrite pipeline: validate the request, call the rewrite providers,
clean the reply, merge it into the template's rewrite window, then score the
result and optionally produce a cover letter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from tailorloop.document.merge import clean_reply, merge_into_template
from tailorloop.llm.config import LLMConfig, ProviderRole, get_llm_config
from tailorloop.llm.router import CompletionError, CompletionRequest, CompletionRouter
from tailorloop.tailoring.config import TailoringConfig, get_tailoring_config
from tailorloop.tailoring.cover_letter import CoverLetterService
from tailorloop.tailoring.models import (
    RewriteInputError,
    RewriteReply,
    RewriteRequest,
    ScoreResult,
)
from tailorloop.tailoring.prompts import (
    LENGTH_POLICY,
    REWRITE_SYSTEM_PROMPT,
    build_rewrite_turns,
)
from tailorloop.tailoring.scoring import ScoreExtractor

logger = logging.getLogger(__name__)


class EmptyRewriteError(Exception):
    """Raised when the provider reply merges into an empty document."""


@dataclass
class TailoringResult:
    """Result of a complete tailoring operation."""

    success: bool
    error: str | None = None
    details: str | None = None
    status_code: int | None = None

    reply: RewriteReply | None = None
    scores: ScoreResult = field(default_factory=ScoreResult)
    cover_letter: str = ""

    completed_at: datetime = field(default_factory=datetime.now)

    @property
    def document(self) -> str:
        return self.reply.merged_document if self.reply else ""


def compose_instructions(
    profile_instructions: str,
    *extra: str,
    include_length_policy: bool = True,
) -> str:
    """Join profile instructions, the length policy, and any extra blocks."""
    parts = [profile_instructions]
    if include_length_policy:
        parts.append(LENGTH_POLICY)
    parts.extend(extra)
    return "\n\n".join(part for part in parts if part and part.strip())


class TailoringService:
    """Main service for resume tailoring.

    Orchestrates the pipeline:
    1. Rewrite the template body (primary provider, fallback to secondary)
    2. Merge the reply into the template's rewrite window
    3. Score the merged document (best-effort)
    4. Generate a cover letter (optional, best-effort)
    """

    def __init__(
        self,
        config: TailoringConfig | None = None,
        llm_config: LLMConfig | None = None,
        router: CompletionRouter | None = None,
    ):
        """Initialize the tailoring service.

        Args:
            config: Optional TailoringConfig. Uses global config if not provided.
            llm_config: Optional LLMConfig. Uses global config if not provided.
            router: Optional CompletionRouter shared by all sub-services.
        """
        self.config = config or get_tailoring_config()
        self.llm_config = llm_config or get_llm_config()
        self.router = router or CompletionRouter(config=self.llm_config)

        self.score_extractor = ScoreExtractor(
            router=self.router, config=self.config, llm_config=self.llm_config
        )
        self.cover_letter_service = CoverLetterService(
            router=self.router, config=self.config, llm_config=self.llm_config
        )

    async def rewrite(self, request: RewriteRequest) -> RewriteReply:
        """Rewrite the template for the job description.

        Args:
            request: The rewrite request.

        Returns:
            RewriteReply holding the merged document.

        Raises:
            RewriteInputError: If a required field is blank.
            CompletionError: If both rewrite providers fail.
            EmptyRewriteError: If the reply is empty after merging.
        """
        request.validate_inputs()

        completion = CompletionRequest(
            system=REWRITE_SYSTEM_PROMPT,
            turns=build_rewrite_turns(
                template=request.template,
                instructions=request.instructions,
                job_description=request.job_description,
            ),
            max_tokens=self.config.rewrite_max_tokens,
            temperature=self.config.temperature,
        )
        reply = await self.router.issue(
            self.llm_config.provider(ProviderRole.PRIMARY),
            self.llm_config.provider(ProviderRole.SECONDARY),
            completion,
        )

        cleaned = clean_reply(reply.text)
        merged = merge_into_template(cleaned, request.template)
        if not merged.strip():
            raise EmptyRewriteError("No response returned from the model.")

        logger.info(
            f"Rewrite merged via {reply.provider.label} "
            f"({len(cleaned)} chars replaced, {len(merged)} chars total)"
        )
        return RewriteReply(
            raw_text=reply.text,
            cleaned_text=cleaned,
            merged_document=merged,
        )

    async def tailor(
        self,
        request: RewriteRequest,
        *,
        cover_letter_template: str | None = None,
        cover_letter_instructions: str | None = None,
        generate_cover_letter: bool = False,
    ) -> TailoringResult:
        """Run the complete tailoring pipeline.

        Only the rewrite itself can fail the run; scoring and cover letter
        failures degrade to empty values.

        Args:
            request: The rewrite request.
            cover_letter_template: LaTeX cover letter template.
            cover_letter_instructions: Cover letter instructions.
            generate_cover_letter: Whether to generate a cover letter.

        Returns:
            TailoringResult with the merged document or an error.
        """
        logger.info("Starting tailoring pipeline")

        try:
            reply = await self.rewrite(request)
        except RewriteInputError as e:
            return TailoringResult(success=False, error=str(e))
        except CompletionError as e:
            logger.error(f"Rewrite failed: {e}")
            return TailoringResult(
                success=False,
                error=str(e),
                details=e.details,
                status_code=e.status_code,
            )
        except EmptyRewriteError as e:
            return TailoringResult(success=False, error=str(e))

        scores = await self.score_extractor.extract(
            request.job_description, reply.merged_document
        )

        cover_letter = ""
        if generate_cover_letter:
            cover_letter = await self.cover_letter_service.generate(
                template=cover_letter_template,
                instructions=cover_letter_instructions,
                job_description=request.job_description,
            )

        logger.info("Tailoring pipeline completed successfully")
        return TailoringResult(
            success=True,
            reply=reply,
            scores=scores,
            cover_letter=cover_letter,
        )
