"""Resume tailoring module.

This module provides functionality for:
- Rewriting a LaTeX resume template for a job description
- Merging the rewritten body back into the untouched template shell
- Scoring the result for ATS match and interview likelihood
- Generating a tailored cover letter

Main Entry Point:
    TailoringService - Orchestrates the complete tailoring pipeline

Example:
    from tailorloop.tailoring import RewriteRequest, TailoringService

    service = TailoringService()
    result = await service.tailor(RewriteRequest(template=tex, instructions=text, job_description=jd))

    if result.success:
        print(result.document)
"""

from tailorloop.tailoring.config import (
    TailoringConfig,
    get_tailoring_config,
    reset_tailoring_config,
)
from tailorloop.tailoring.cover_letter import CoverLetterService
from tailorloop.tailoring.models import (
    RewriteInputError,
    RewriteReply,
    RewriteRequest,
    ScoreResult,
)
from tailorloop.tailoring.scoring import ScoreExtractor, clamp_score
from tailorloop.tailoring.service import (
    EmptyRewriteError,
    TailoringResult,
    TailoringService,
    compose_instructions,
)

__all__ = [
    # Main service
    "TailoringService",
    "TailoringResult",
    "compose_instructions",
    # Configuration
    "TailoringConfig",
    "get_tailoring_config",
    "reset_tailoring_config",
    # Sub-services
    "ScoreExtractor",
    "CoverLetterService",
    "clamp_score",
    # Models
    "RewriteRequest",
    "RewriteReply",
    "ScoreResult",
    # Errors
    "RewriteInputError",
    "EmptyRewriteError",
]
