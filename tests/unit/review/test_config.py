"""Tests for review configuration."""

import pytest
from pydantic import ValidationError

from tailorloop.review.config import ReviewConfig, get_review_config, reset_review_config


def test_defaults():
    config = ReviewConfig(_env_file=None)
    assert config.max_tokens == 1500
    assert config.stage_prompts == {}


def test_stage_prompts_from_env(monkeypatch):
    monkeypatch.setenv("REVIEW_STAGE_PROMPTS", '{"ats": "Strict ATS."}')
    config = ReviewConfig(_env_file=None)
    assert config.stage_prompts == {"ats": "Strict ATS."}


def test_unknown_stage_rejected():
    with pytest.raises(ValidationError):
        ReviewConfig(_env_file=None, stage_prompts={"vibes": "x"})


def test_singleton_reset():
    reset_review_config()
    first = get_review_config()
    assert get_review_config() is first
    reset_review_config()
    assert get_review_config() is not first
    reset_review_config()
