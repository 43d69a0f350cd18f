"""Data models for the multi-stage review.

Contains Pydantic models for:
- RequirementPair: One JD requirement with its resume evidence and verdict
- StageResult: Verdict set of a single stage (status is derived from pairs)
- StageRecord: Per-stage state machine (idle/loading/resolved/failed)
- ReviewRun: Records of all six stages plus the progress counter
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Verdict = Literal["pass", "concern"]


def normalize_verdict(value: Any) -> Verdict:
    """Anything other than an explicit pass counts as a concern."""
    if isinstance(value, str) and value.strip().lower() == "pass":
        return "pass"
    return "concern"


class Stage(str, Enum):
    """The six review stages, in run order."""

    ELIGIBILITY = "eligibility"
    ATS = "ats"
    BEHAVIORAL = "behavioral"
    AUTHENTICITY = "authenticity"
    AI_CONTENT = "ai_content"
    GENUINENESS = "genuineness"


STAGE_ORDER: tuple[Stage, ...] = tuple(Stage)


class StageState(str, Enum):
    """Lifecycle of a single stage review."""

    IDLE = "idle"
    LOADING = "loading"
    RESOLVED = "resolved"
    FAILED = "failed"


class RequirementPair(BaseModel):
    """A JD requirement matched against resume evidence."""

    jd: str = Field(default="", description="JD requirement")
    resume: str = Field(default="", description="Matching or missing resume evidence")
    verdict: Verdict = Field(default="concern", description="pass or concern")
    reason: str = Field(default="", description="Why the verdict was given")

    @field_validator("verdict", mode="before")
    @classmethod
    def coerce_verdict(cls, v: Any) -> Verdict:
        return normalize_verdict(v)

    @field_validator("jd", "resume", "reason", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @property
    def is_concern(self) -> bool:
        return self.verdict != "pass"


class StageResult(BaseModel):
    """Verdict set for one stage.

    ``status`` is always ``concern`` when any pair is a concern, whatever the
    provider claimed.
    """

    status: Verdict = "concern"
    pairs: list[RequirementPair] = Field(default_factory=list)
    fix_prompt: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v: Any) -> Verdict:
        return normalize_verdict(v)

    @field_validator("fix_prompt", mode="before")
    @classmethod
    def coerce_prompt(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @model_validator(mode="after")
    def derive_status(self) -> StageResult:
        if any(pair.is_concern for pair in self.pairs):
            self.status = "concern"
        return self

    @property
    def concern_pairs(self) -> list[RequirementPair]:
        return [pair for pair in self.pairs if pair.is_concern]

    @property
    def needs_resolution(self) -> bool:
        return self.status == "concern" or bool(self.concern_pairs)

    def with_pair_ignored(self, index: int) -> StageResult:
        """Return a copy with pair ``index`` forced to pass.

        The pair's reason is removed from the fix prompt, and the stage passes
        once every pair passes.

        Raises:
            IndexError: If ``index`` is out of range; negative indexes are
                rejected.
        """
        if not 0 <= index < len(self.pairs):
            raise IndexError(f"Pair index {index} out of range")
        target = self.pairs[index]
        pairs = [
            pair.model_copy(update={"verdict": "pass"}) if i == index else pair
            for i, pair in enumerate(self.pairs)
        ]
        status: Verdict = (
            "pass" if all(pair.verdict == "pass" for pair in pairs) else self.status
        )
        prompt = self.fix_prompt
        if prompt and target.reason:
            prompt = prompt.replace(target.reason, "").strip()
        return StageResult(status=status, pairs=pairs, fix_prompt=prompt)


class StageRecord(BaseModel):
    """State of one stage within a review run.

    Transitions return new records; a failure keeps the last resolved result.
    """

    model_config = ConfigDict(frozen=True)

    stage: Stage
    state: StageState = StageState.IDLE
    result: StageResult | None = None
    error: str | None = None

    def start(self) -> StageRecord:
        return self.model_copy(update={"state": StageState.LOADING, "error": None})

    def resolve(self, result: StageResult) -> StageRecord:
        return self.model_copy(
            update={"state": StageState.RESOLVED, "result": result, "error": None}
        )

    def fail(self, error: str) -> StageRecord:
        return self.model_copy(update={"state": StageState.FAILED, "error": error})


class ReviewRun(BaseModel):
    """All stage records of one review cycle.

    ``progress`` is the number of leading stages reached and never decreases
    within a run.
    """

    model_config = ConfigDict(frozen=True)

    run_id: int
    records: dict[Stage, StageRecord]
    progress: int = 0

    @classmethod
    def create(cls, run_id: int) -> ReviewRun:
        return cls(
            run_id=run_id,
            records={stage: StageRecord(stage=stage) for stage in STAGE_ORDER},
        )

    def with_record(self, record: StageRecord) -> ReviewRun:
        """Return a new run with ``record`` replacing its stage's record."""
        records = dict(self.records)
        records[record.stage] = record
        progress = self.progress
        if record.state is StageState.RESOLVED:
            progress = max(progress, STAGE_ORDER.index(record.stage) + 1)
        return self.model_copy(update={"records": records, "progress": progress})

    def result(self, stage: Stage) -> StageResult | None:
        return self.records[stage].result

    def concerns(self) -> dict[Stage, list[RequirementPair]]:
        """Non-pass pairs per stage, for stages that have any."""
        found: dict[Stage, list[RequirementPair]] = {}
        for stage in STAGE_ORDER:
            result = self.records[stage].result
            if result is not None and result.concern_pairs:
                found[stage] = result.concern_pairs
        return found

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return self.model_dump(mode="json")
