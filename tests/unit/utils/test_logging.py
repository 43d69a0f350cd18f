"""Tests for logging utility."""

import logging
from io import StringIO

import pytest

from tailorloop.utils.logging import NOISY_LOGGERS, configure_logging, reset_logging


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()


class TestLoggerConfiguration:
    def test_configure_logging_creates_logger(self):
        logger = configure_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "tailorloop"

    def test_configure_logging_respects_level(self):
        assert configure_logging(level="DEBUG").level == logging.DEBUG
        assert configure_logging(level="WARNING").level == logging.WARNING

    def test_default_level_is_info(self):
        assert configure_logging().level == logging.INFO

    def test_single_handler_after_repeated_calls(self):
        configure_logging()
        logger = configure_logging()
        assert len(logger.handlers) == 1


class TestLogOutput:
    def test_log_message_includes_level_and_name(self):
        logger = configure_logging(level="INFO")
        buffer = StringIO()
        handler = logging.StreamHandler(buffer)
        handler.setFormatter(logger.handlers[0].formatter)
        logger.addHandler(handler)

        logging.getLogger("tailorloop.review.orchestrator").info("Stage finished")

        output = buffer.getvalue()
        assert "INFO" in output
        assert "tailorloop.review" in output
        assert "Stage finished" in output


class TestLibraryLoggers:
    def test_provider_loggers_quieted_at_info(self):
        configure_logging(level="INFO")
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_provider_loggers_left_verbose_when_debugging(self):
        configure_logging(level="DEBUG")
        assert logging.getLogger("LiteLLM").level == logging.DEBUG

    def test_reset_restores_library_levels(self):
        configure_logging(level="INFO")
        reset_logging()
        assert logging.getLogger("httpx").level == logging.NOTSET
