"""Multi-stage resume review.

Six independent reviewer stages score a resume against a job description as
requirement/evidence pairs. The ReviewOrchestrator runs them in order and
drives resolve cycles that rewrite the resume from the aggregated concerns.

Example:
    from tailorloop.review import ReviewOrchestrator

    orchestrator = ReviewOrchestrator()
    await orchestrator.submit(request)
    while orchestrator.has_concerns:
        await orchestrator.resolve()
"""

from tailorloop.review.config import ReviewConfig, get_review_config, reset_review_config
from tailorloop.review.models import (
    STAGE_ORDER,
    RequirementPair,
    ReviewRun,
    Stage,
    StageRecord,
    StageResult,
    StageState,
)
from tailorloop.review.orchestrator import ReviewOrchestrator
from tailorloop.review.parser import StageParse, parse_stage_reply
from tailorloop.review.reviewer import ReviewInputError, StageReviewer
from tailorloop.review.stages import (
    RESPONSE_CONTRACT,
    STAGE_DEFINITIONS,
    StageDefinition,
    build_instruction,
)

__all__ = [
    # Main entry points
    "ReviewOrchestrator",
    "StageReviewer",
    # Configuration
    "ReviewConfig",
    "get_review_config",
    "reset_review_config",
    # Stage table
    "STAGE_DEFINITIONS",
    "STAGE_ORDER",
    "RESPONSE_CONTRACT",
    "StageDefinition",
    "build_instruction",
    # Parsing
    "parse_stage_reply",
    "StageParse",
    # Models
    "Stage",
    "StageState",
    "StageRecord",
    "StageResult",
    "RequirementPair",
    "ReviewRun",
    # Errors
    "ReviewInputError",
]
