"""Tests for the single-stage reviewer."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from tailorloop.llm.config import Envelope, LLMConfig, ProviderRole
from tailorloop.llm.router import CompletionError, CompletionReply, CompletionRouter
from tailorloop.review.config import ReviewConfig
from tailorloop.review.models import Stage, StageRecord, StageState
from tailorloop.review.reviewer import ReviewInputError, StageReviewer, build_review_turn

LLM_CONFIG = LLMConfig(_env_file=None, openai_api_key="sk", anthropic_api_key="ant")

PASS_REPLY = json.dumps(
    {
        "status": "pass",
        "pairs": [{"jd": "Python", "resume": "5 years", "verdict": "pass", "reason": "ok"}],
        "prompt": "",
    }
)


class ProviderHTTPError(Exception):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


def make_response(content):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


@pytest.fixture
def router():
    mock = MagicMock()
    mock.issue = AsyncMock(
        return_value=CompletionReply(
            content=PASS_REPLY,
            text=PASS_REPLY,
            provider=LLM_CONFIG.provider(ProviderRole.PRIMARY),
        )
    )
    return mock


@pytest.fixture
def reviewer(router):
    return StageReviewer(
        router=router, config=ReviewConfig(_env_file=None), llm_config=LLM_CONFIG
    )


def test_build_review_turn():
    assert build_review_turn("jd", "cv") == "JOB DESCRIPTION:\njd\n\nRESUME:\ncv"


class TestReview:
    @pytest.mark.asyncio
    async def test_parses_reply(self, reviewer):
        result = await reviewer.review(Stage.ELIGIBILITY, "jd", "resume")
        assert result.status == "pass"
        assert result.pairs[0].jd == "Python"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("stage", "primary", "fallback"),
        [
            (Stage.ELIGIBILITY, ProviderRole.PRIMARY, ProviderRole.SECONDARY),
            (Stage.ATS, ProviderRole.SECONDARY, ProviderRole.PRIMARY),
            (Stage.BEHAVIORAL, ProviderRole.TERTIARY, ProviderRole.PRIMARY),
        ],
    )
    async def test_routes_to_stage_provider(self, reviewer, router, stage, primary, fallback):
        await reviewer.review(stage, "jd", "resume")
        first, second, request = router.issue.call_args.args
        assert first.role is primary
        assert second.role is fallback
        assert request.turns == (build_review_turn("jd", "resume"),)

    @pytest.mark.asyncio
    async def test_blank_inputs_rejected(self, reviewer, router):
        with pytest.raises(ReviewInputError):
            await reviewer.review(Stage.ATS, "", "resume")
        router.issue.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_override_used_as_system_instruction(self, reviewer, router):
        await reviewer.review(Stage.ATS, "jd", "cv", {"ats": "Custom ATS prompt"})
        _, _, request = router.issue.call_args.args
        assert request.system.startswith("Custom ATS prompt")


class TestBehavioralFallback:
    @pytest.mark.asyncio
    async def test_tertiary_failure_falls_back_to_primary(self):
        reviewer = StageReviewer(
            router=CompletionRouter(LLM_CONFIG),
            config=ReviewConfig(_env_file=None),
            llm_config=LLM_CONFIG,
        )
        with patch(
            "tailorloop.llm.router.acompletion", new_callable=AsyncMock
        ) as mock_completion:
            mock_completion.side_effect = [
                ProviderHTTPError("overloaded", 529),
                make_response(PASS_REPLY),
            ]

            result = await reviewer.review(Stage.BEHAVIORAL, "jd", "resume")

        assert result.status == "pass"
        first_call, second_call = mock_completion.call_args_list
        assert first_call.kwargs["model"] == "anthropic/claude-3-5-sonnet-20241022"
        assert first_call.kwargs["messages"][0]["content"][0]["type"] == "text"
        assert second_call.kwargs["model"] == "gpt-4.1"
        assert second_call.kwargs["messages"][0]["role"] == "system"

    def test_tertiary_envelope(self):
        assert LLM_CONFIG.provider(ProviderRole.TERTIARY).envelope is Envelope.SINGLE_TURN


class TestRun:
    @pytest.mark.asyncio
    async def test_success_resolves_record(self, reviewer):
        record = StageRecord(stage=Stage.ATS).start()
        final = await reviewer.run(record, "jd", "resume")
        assert final.state is StageState.RESOLVED
        assert final.result.status == "pass"

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_result(self, reviewer, router):
        resolved = await reviewer.run(StageRecord(stage=Stage.ATS).start(), "jd", "cv")
        router.issue.side_effect = CompletionError("Completion request failed.", 500)

        failed = await reviewer.run(resolved.start(), "jd", "cv")

        assert failed.state is StageState.FAILED
        assert failed.error == "Completion request failed."
        assert failed.result == resolved.result

    @pytest.mark.asyncio
    async def test_blank_resume_fails_record(self, reviewer):
        failed = await reviewer.run(StageRecord(stage=Stage.ATS).start(), "jd", " ")
        assert failed.state is StageState.FAILED
