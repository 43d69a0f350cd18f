"""Tests for review data models."""

import pytest

from tailorloop.review.models import (
    STAGE_ORDER,
    RequirementPair,
    ReviewRun,
    Stage,
    StageRecord,
    StageResult,
    StageState,
)


def pair(verdict: str, reason: str = "r") -> RequirementPair:
    return RequirementPair(jd="req", resume="ev", verdict=verdict, reason=reason)


class TestRequirementPair:
    @pytest.mark.parametrize("raw", ["concern", "fail", "", None, "maybe"])
    def test_anything_but_pass_is_concern(self, raw):
        assert RequirementPair(verdict=raw).verdict == "concern"

    def test_pass_is_case_insensitive(self):
        assert RequirementPair(verdict=" PASS ").verdict == "pass"

    def test_text_fields_coerced(self):
        p = RequirementPair(jd=None, resume=5, reason=None)
        assert p.jd == ""
        assert p.resume == "5"
        assert p.reason == ""


class TestStageResult:
    def test_concern_pair_overrides_claimed_pass(self):
        result = StageResult(status="pass", pairs=[pair("pass"), pair("concern")])
        assert result.status == "concern"

    def test_all_pass_keeps_pass(self):
        assert StageResult(status="pass", pairs=[pair("pass")]).status == "pass"

    def test_upstream_concern_kept_without_concern_pairs(self):
        result = StageResult(status="concern", pairs=[pair("pass")])
        assert result.status == "concern"
        assert result.needs_resolution
        assert result.concern_pairs == []

    def test_ignore_last_concern_passes_stage(self):
        result = StageResult(
            status="concern",
            pairs=[pair("pass"), pair("concern", "Missing Kubernetes")],
            fix_prompt="Add Kubernetes experience.\nMissing Kubernetes",
        )

        updated = result.with_pair_ignored(1)

        assert updated.status == "pass"
        assert updated.concern_pairs == []
        assert "Missing Kubernetes" not in updated.fix_prompt
        assert result.pairs[1].verdict == "concern"

    def test_ignore_one_of_two_concerns(self):
        result = StageResult(pairs=[pair("concern", "a"), pair("concern", "b")])
        updated = result.with_pair_ignored(0)
        assert updated.status == "concern"
        assert len(updated.concern_pairs) == 1

    def test_ignore_out_of_range(self):
        with pytest.raises(IndexError):
            StageResult(pairs=[pair("concern")]).with_pair_ignored(3)

    def test_negative_index_rejected_without_touching_prompt(self):
        result = StageResult(
            pairs=[pair("concern", "Missing Go"), pair("concern", "Missing Rust")],
            fix_prompt="Fix: Missing Go. Then Missing Rust.",
        )

        with pytest.raises(IndexError):
            result.with_pair_ignored(-1)

        assert result.fix_prompt == "Fix: Missing Go. Then Missing Rust."
        assert [p.verdict for p in result.pairs] == ["concern", "concern"]


class TestStageRecord:
    def test_transitions(self):
        record = StageRecord(stage=Stage.ATS)
        assert record.state is StageState.IDLE

        loading = record.start()
        assert loading.state is StageState.LOADING

        resolved = loading.resolve(StageResult(status="pass"))
        assert resolved.state is StageState.RESOLVED
        assert resolved.result.status == "pass"

        failed = resolved.start().fail("boom")
        assert failed.state is StageState.FAILED
        assert failed.error == "boom"
        assert failed.result is not None


class TestReviewRun:
    def test_create_has_idle_record_per_stage(self):
        run = ReviewRun.create(7)
        assert run.run_id == 7
        assert list(run.records) == list(STAGE_ORDER)
        assert run.progress == 0

    def test_progress_never_decreases(self):
        run = ReviewRun.create(1)
        run = run.with_record(StageRecord(stage=Stage.ATS).resolve(StageResult()))
        assert run.progress == 2

        run = run.with_record(StageRecord(stage=Stage.ELIGIBILITY).resolve(StageResult()))
        assert run.progress == 2

        run = run.with_record(StageRecord(stage=Stage.BEHAVIORAL).start().fail("x"))
        assert run.progress == 2

    def test_concerns_grouped_by_stage(self):
        run = ReviewRun.create(1).with_record(
            StageRecord(stage=Stage.GENUINENESS).resolve(
                StageResult(pairs=[pair("pass"), pair("concern")])
            )
        )
        concerns = run.concerns()
        assert list(concerns) == [Stage.GENUINENESS]
        assert len(concerns[Stage.GENUINENESS]) == 1

    def test_to_dict(self):
        data = ReviewRun.create(3).to_dict()
        assert data["run_id"] == 3
        assert data["records"]["ats"]["state"] == "idle"
