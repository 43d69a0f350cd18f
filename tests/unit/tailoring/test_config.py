"""Unit tests for tailoring configuration."""

import os

import pytest
from pydantic import ValidationError

from tailorloop.tailoring.config import (
    TailoringConfig,
    get_tailoring_config,
    reset_tailoring_config,
)

ENV_KEYS_TO_REMOVE = [
    "TAILORING_TEMPERATURE",
    "TAILORING_REWRITE_MAX_TOKENS",
    "TAILORING_SCORE_MAX_TOKENS",
    "TAILORING_COVER_LETTER_MAX_TOKENS",
    "TAILORING_INCLUDE_LENGTH_POLICY",
]


@pytest.fixture
def isolated_env():
    """Remove tailoring env vars for isolated testing."""
    saved = {k: os.environ.pop(k, None) for k in ENV_KEYS_TO_REMOVE}
    reset_tailoring_config()
    yield
    for k, v in saved.items():
        if v is not None:
            os.environ[k] = v
        elif k in os.environ:
            del os.environ[k]
    reset_tailoring_config()


class TestTailoringConfig:
    def test_defaults(self, isolated_env):
        config = TailoringConfig(_env_file=None)
        assert config.temperature == 0.0
        assert config.rewrite_max_tokens == 4000
        assert config.score_max_tokens == 400
        assert config.include_length_policy is True

    def test_env_prefix(self, isolated_env, monkeypatch):
        monkeypatch.setenv("TAILORING_REWRITE_MAX_TOKENS", "6000")
        monkeypatch.setenv("TAILORING_INCLUDE_LENGTH_POLICY", "false")
        config = TailoringConfig(_env_file=None)
        assert config.rewrite_max_tokens == 6000
        assert config.include_length_policy is False

    def test_rejects_out_of_range_temperature(self, isolated_env):
        with pytest.raises(ValidationError):
            TailoringConfig(_env_file=None, temperature=3.0)

    def test_singleton_reset(self, isolated_env):
        first = get_tailoring_config()
        assert get_tailoring_config() is first
        reset_tailoring_config()
        assert get_tailoring_config() is not first
