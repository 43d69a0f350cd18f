"""Review Orchestrator.

Runs the six review stages in order against the current document, tracks
progress, and drives the user-driven resolve loop: collect concerns, rewrite
with fix instructions, replace the document, re-run every stage.

Each review cycle carries a run id. Results that come back for an older run id
are dropped, so starting a new submission discards in-flight stage calls.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from tailorloop.document.plaintext import latex_to_text
from tailorloop.review.models import (
    STAGE_ORDER,
    ReviewRun,
    Stage,
    StageRecord,
    StageState,
)
from tailorloop.review.reviewer import StageReviewer
from tailorloop.review.stages import get_definition
from tailorloop.tailoring.models import RewriteRequest, ScoreResult
from tailorloop.tailoring.service import TailoringResult, TailoringService

logger = logging.getLogger(__name__)


class ReviewOrchestrator:
    """Owns the document under review and the current ReviewRun."""

    def __init__(
        self,
        reviewer: StageReviewer | None = None,
        tailoring: TailoringService | None = None,
        stage_prompts: Mapping[Stage | str, str] | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            reviewer: StageReviewer used for every stage.
            tailoring: TailoringService used by resolve cycles.
            stage_prompts: Per-stage instruction overrides.
        """
        self.reviewer = reviewer or StageReviewer()
        self.tailoring = tailoring or TailoringService()
        self.stage_prompts: dict[Stage | str, str] = dict(stage_prompts or {})

        self.request: RewriteRequest | None = None
        self.document = ""
        self.job_description = ""
        self.resume_text = ""
        self.scores = ScoreResult()

        self._run_counter = 0
        self.run = ReviewRun.create(self._run_counter)

        self.resolve_open = False
        self.resolve_edits: dict[Stage, str] = {}

    # -- inputs ------------------------------------------------------------

    def load(
        self,
        document: str,
        job_description: str,
        request: RewriteRequest | None = None,
        scores: ScoreResult | None = None,
        resume_text: str | None = None,
    ) -> int:
        """Replace the inputs under review and start a fresh run.

        Args:
            document: Merged LaTeX document.
            job_description: Target job description.
            request: The rewrite request that produced ``document``; needed
                for resolve cycles.
            scores: Scores reported for ``document``.
            resume_text: Plain-text resume to review instead of the text
                derived from ``document``.

        Returns:
            The new run id.
        """
        self.document = document
        self.job_description = job_description
        self.request = request
        self.scores = scores or ScoreResult()
        self.resume_text = resume_text if resume_text is not None else latex_to_text(document)
        self.close_resolve()
        return self.start_run()

    async def submit(self, request: RewriteRequest, **tailor_kwargs) -> TailoringResult:
        """Tailor a new document, load it, and review every stage."""
        self.cancel()
        result = await self.tailoring.tailor(request, **tailor_kwargs)
        if not result.success:
            return result
        self.load(
            result.document,
            request.job_description,
            request=request,
            scores=result.scores,
        )
        await self.run_all()
        return result

    # -- runs --------------------------------------------------------------

    def start_run(self) -> int:
        """Start a new ReviewRun; results for older run ids will be dropped."""
        self._run_counter += 1
        self.run = ReviewRun.create(self._run_counter)
        return self.run.run_id

    def cancel(self) -> None:
        """Discard the current run and anything still in flight for it."""
        self.start_run()
        self.close_resolve()

    @property
    def progress(self) -> int:
        return self.run.progress

    async def run_stage(self, stage: Stage, run_id: int | None = None) -> StageRecord | None:
        """Run one stage for the current run.

        Returns:
            The final record, or None when the run was superseded while the
            stage was in flight.
        """
        run_id = self.run.run_id if run_id is None else run_id
        if run_id != self.run.run_id:
            return None

        loading = self.run.records[stage].start()
        self.run = self.run.with_record(loading)

        record = await self.reviewer.run(
            loading, self.job_description, self.resume_text, self.stage_prompts
        )

        if run_id != self.run.run_id:
            logger.debug(f"Dropping stale {stage.value} result for run {run_id}")
            return None

        self.run = self.run.with_record(record)
        return record

    async def run_all(self) -> ReviewRun:
        """Run all six stages sequentially for the current run."""
        run_id = self.run.run_id
        for stage in STAGE_ORDER:
            if run_id != self.run.run_id:
                logger.info(f"Run {run_id} superseded; stopping stage sequence")
                break
            await self.run_stage(stage, run_id)
        return self.run

    # -- concerns ----------------------------------------------------------

    def concerns(self):
        """Non-pass pairs per stage."""
        return self.run.concerns()

    @property
    def has_concerns(self) -> bool:
        return bool(self.run.concerns())

    def stages_needing_resolution(self) -> list[Stage]:
        stages = []
        for stage in STAGE_ORDER:
            result = self.run.result(stage)
            if result is not None and result.needs_resolution:
                stages.append(stage)
        return stages

    def build_fix_instructions(self) -> str:
        """Aggregate concerns into one fix-instruction block grouped by stage.

        Resolve-view edits take the place of a stage's fix prompt.
        """
        lines: list[str] = []
        for stage in STAGE_ORDER:
            result = self.run.result(stage)
            if result is None or not result.needs_resolution:
                continue
            pair_texts = [
                f"JD: {pair.jd} | Reason: {pair.reason}" for pair in result.concern_pairs
            ]
            prompt = self.resolve_edits.get(stage, result.fix_prompt).strip()
            if not pair_texts and not prompt:
                continue
            lines.append(f"Stage {get_definition(stage).label}:")
            if prompt:
                lines.append(prompt)
            lines.extend(pair_texts)
        return "\n".join(lines)

    def ignore_pair(self, stage: Stage, index: int) -> StageRecord:
        """Force one pair to pass without a model call.

        Raises:
            ValueError: If the stage has no result yet.
            IndexError: If ``index`` is out of range.
        """
        record = self.run.records[stage]
        if record.result is None:
            raise ValueError(f"Stage {stage.value} has no result to update.")

        ignored = record.result.with_pair_ignored(index)
        reason = record.result.pairs[index].reason
        updated = record.model_copy(update={"result": ignored})
        self.run = self.run.with_record(updated)
        if reason and stage in self.resolve_edits:
            self.resolve_edits[stage] = self.resolve_edits[stage].replace(reason, "").strip()
        if self.resolve_open:
            self.refresh_resolve()
        return updated

    # -- resolve view ------------------------------------------------------

    def open_resolve(self) -> dict[Stage, str]:
        """Open the resolve view with each concern stage's fix prompt."""
        self.resolve_edits = {
            stage: self.run.result(stage).fix_prompt
            for stage in self.stages_needing_resolution()
        }
        self.resolve_open = True
        return dict(self.resolve_edits)

    def edit_resolve_prompt(self, stage: Stage, text: str) -> None:
        self.resolve_edits[stage] = text

    def refresh_resolve(self) -> None:
        """Recompute the resolve view; close it once no concern pair remains.

        Edited prompts are kept for stages that still need resolution.
        """
        if not self.has_concerns:
            self.close_resolve()
            return
        self.resolve_edits = {
            stage: self.resolve_edits.get(stage, self.run.result(stage).fix_prompt)
            for stage in self.stages_needing_resolution()
        }

    def close_resolve(self) -> None:
        self.resolve_open = False
        self.resolve_edits = {}

    async def resolve(self) -> TailoringResult | None:
        """Run one resolve cycle.

        Rewrites the document with the original instructions plus the
        aggregated fix block, replaces the document, and re-runs all stages.

        Returns:
            The TailoringResult of the rewrite, or None if nothing needed
            resolving. A failed rewrite leaves the current document and run
            untouched.

        Raises:
            ValueError: If no rewrite request has been loaded.
        """
        fix_block = self.build_fix_instructions()
        if not fix_block:
            self.close_resolve()
            return None
        if self.request is None:
            raise ValueError("No rewrite request loaded; cannot resolve.")

        request = self.request.with_extra_instructions(fix_block)
        logger.info(
            f"Resolving {len(self.stages_needing_resolution())} stage(s) with fix instructions"
        )
        result = await self.tailoring.tailor(request)
        if not result.success:
            logger.error(f"Resolve rewrite failed: {result.error}")
            return result

        keep_open = self.resolve_open
        edits = dict(self.resolve_edits)
        self.load(
            result.document,
            self.job_description,
            request=self.request,
            scores=result.scores,
        )
        if keep_open:
            self.resolve_open = True
            self.resolve_edits = edits

        await self.run_all()
        if self.resolve_open:
            self.refresh_resolve()
        return result

    @property
    def is_clean(self) -> bool:
        """Every stage resolved with no concern-bearing pair."""
        return all(
            record.state is StageState.RESOLVED for record in self.run.records.values()
        ) and not self.has_concerns
