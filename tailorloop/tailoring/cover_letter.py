"""Cover letter generation.

Best-effort: a failed or empty generation returns an empty string and logs a
warning rather than failing the surrounding tailoring run.
"""

from __future__ import annotations

import logging

from tailorloop.document.merge import clean_reply
from tailorloop.llm.config import LLMConfig, ProviderRole, get_llm_config
from tailorloop.llm.router import CompletionError, CompletionRequest, CompletionRouter
from tailorloop.tailoring.config import TailoringConfig, get_tailoring_config
from tailorloop.tailoring.prompts import (
    COVER_LETTER_SYSTEM_PROMPT,
    build_cover_letter_turns,
)

logger = logging.getLogger(__name__)


class CoverLetterService:
    """Rewrites a LaTeX cover letter template for a job description."""

    def __init__(
        self,
        router: CompletionRouter | None = None,
        config: TailoringConfig | None = None,
        llm_config: LLMConfig | None = None,
    ):
        self.config = config or get_tailoring_config()
        self.llm_config = llm_config or get_llm_config()
        self.router = router or CompletionRouter(config=self.llm_config)

    async def generate(
        self,
        *,
        template: str | None,
        instructions: str | None,
        job_description: str,
    ) -> str:
        """Generate a tailored cover letter.

        Args:
            template: LaTeX cover letter template.
            instructions: Cover letter instructions.
            job_description: Target job description.

        Returns:
            The cleaned LaTeX cover letter, or "" on any failure.
        """
        if not template or not instructions:
            logger.warning(
                "Cover letter generation requested but missing template or instructions."
            )
            return ""

        request = CompletionRequest(
            system=COVER_LETTER_SYSTEM_PROMPT,
            turns=build_cover_letter_turns(
                template=template,
                instructions=instructions,
                job_description=job_description,
            ),
            max_tokens=self.config.cover_letter_max_tokens,
            temperature=self.config.temperature,
        )

        try:
            reply = await self.router.issue(
                self.llm_config.provider(ProviderRole.PRIMARY), None, request
            )
        except CompletionError as e:
            logger.warning(f"Cover letter generation failed: {e.details or e}")
            return ""

        return clean_reply(reply.text)
