"""Stage definitions: labels, provider routing, and default instructions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from tailorloop.llm.config import ProviderRole
from tailorloop.review.models import Stage


@dataclass(frozen=True)
class StageDefinition:
    """How one review stage is labelled, routed, and instructed."""

    stage: Stage
    label: str
    provider: ProviderRole
    default_prompt: str


STAGE_DEFINITIONS: dict[Stage, StageDefinition] = {
    Stage.ELIGIBILITY: StageDefinition(
        stage=Stage.ELIGIBILITY,
        label="Eligibility & Shortlisting Review",
        provider=ProviderRole.PRIMARY,
        default_prompt=(
            "You are an HR Eligibility and Shortlisting Reviewer. Based on the Job "
            "Description and the candidate's Resume, give 2-3 short feedback points about "
            "whether the candidate meets the mandatory requirements and aligns with "
            "responsibilities/preferred skills."
        ),
    ),
    Stage.ATS: StageDefinition(
        stage=Stage.ATS,
        label="Resume & ATS Review",
        provider=ProviderRole.SECONDARY,
        default_prompt=(
            "You are an ATS and Resume Quality Evaluator. Using the Job Description and "
            "the candidate's Resume, give 2-3 short feedback points about ATS "
            "compatibility, keyword match quality, and any resume structure or "
            "formatting issues."
        ),
    ),
    Stage.BEHAVIORAL: StageDefinition(
        stage=Stage.BEHAVIORAL,
        label="Behavioral & Culture Fit Review",
        provider=ProviderRole.TERTIARY,
        default_prompt=(
            "You are an HR Behavioral and Culture Fit Analyst. Review the Job Description "
            "and the candidate's Resume, and give 2-3 short feedback points about "
            "communication tone, leadership signals, teamwork indicators, and cultural "
            "alignment with the role."
        ),
    ),
    Stage.AUTHENTICITY: StageDefinition(
        stage=Stage.AUTHENTICITY,
        label="Resume Authenticity Check",
        provider=ProviderRole.PRIMARY,
        default_prompt=(
            "You are an HR Authenticity Reviewer. Evaluate the candidate's Resume for "
            "realism and credibility, and give 2-3 short feedback points noting any "
            "inconsistencies, exaggerations, unrealistic achievements, or signs of "
            "over-polished content."
        ),
    ),
    Stage.AI_CONTENT: StageDefinition(
        stage=Stage.AI_CONTENT,
        label="AI-Generated Content Check",
        provider=ProviderRole.PRIMARY,
        default_prompt=(
            "You are an AI-Content Detection Specialist. Analyze the candidate's Resume "
            "and give 2-3 short feedback points about whether the writing appears "
            "AI-generated, overly generic, repetitive, or lacking natural human tone."
        ),
    ),
    Stage.GENUINENESS: StageDefinition(
        stage=Stage.GENUINENESS,
        label="Candidate Genuineness Verification",
        provider=ProviderRole.PRIMARY,
        default_prompt=(
            "You are an HR Identity & Genuineness Verification Expert. Using the Job "
            "Description and the candidate's Resume, provide 2-3 short feedback points "
            "judging whether the candidate appears genuine or potentially fake. Focus on "
            "signals such as having every skill exactly matching the JD, being "
            "unrealistically overskilled, perfect or exaggerated JD alignment, or "
            "unusually polished achievements that do not match natural human career "
            "progression."
        ),
    ),
}

RESPONSE_CONTRACT = """Return JSON: {
  "status": "pass" | "concern",
  "pairs": [
    {"jd": "<JD requirement>", "resume": "<matching or missing evidence>", "verdict": "pass|concern", "reason": "<why>"},
    ...
  ],
  "prompt": "<if concern: 3-5 highly specific change instructions to pass this stage; if pass: null or ''>"
}
Rules:
- Provide 4-6 pairs covering all major JD requirements.
- For each pair, specify the exact JD requirement, the resume evidence (or say "missing"), a verdict (pass/concern), and a concise reason (20-35 words).
- Be explicit and non-generic; call out positives and gaps.
- If status is "concern", include 3-5 highly specific, actionable change instructions (15-25 words each) in the prompt, referencing the exact JD requirement and where to add/adjust in the resume; separate each instruction with a newline."""

# The tertiary provider falls back to the general primary, not to the
# secondary that the primary itself would use.
FALLBACK_ROLES: dict[ProviderRole, ProviderRole] = {
    ProviderRole.PRIMARY: ProviderRole.SECONDARY,
    ProviderRole.SECONDARY: ProviderRole.PRIMARY,
    ProviderRole.TERTIARY: ProviderRole.PRIMARY,
}


def get_definition(stage: Stage | str) -> StageDefinition:
    """Look up a stage definition by enum or key.

    Raises:
        ValueError: If ``stage`` is not a known stage key.
    """
    return STAGE_DEFINITIONS[Stage(stage)]


def build_instruction(stage: Stage, overrides: Mapping[Stage | str, str] | None = None) -> str:
    """Caller override (or the stage default) followed by the response contract."""
    definition = get_definition(stage)
    prompt = ""
    if overrides:
        prompt = overrides.get(stage) or overrides.get(stage.value) or ""
    return f"{prompt.strip() or definition.default_prompt}\n\n{RESPONSE_CONTRACT}"
