"""Logging setup for the tailorloop CLI.

Package modules log through ``logging.getLogger(__name__)``; everything under
the ``tailorloop`` namespace shares the one stderr handler installed here.
"""

import logging
import sys

LOGGER_NAME = "tailorloop"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Provider clients log every request at INFO.
NOISY_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy", "httpx", "httpcore")

_configured = False


def _level_from_name(level: str | None) -> int:
    return getattr(logging, (level or "INFO").upper(), logging.INFO)


def quiet_library_loggers(level: int = logging.WARNING) -> None:
    """Raise provider client loggers to ``level`` unless we are debugging."""
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level)


def configure_logging(
    level: str | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
) -> logging.Logger:
    """Configure and return the ``tailorloop`` logger.

    Repeated calls only change the level. Below INFO the provider client
    loggers are left alone so request traces stay visible.

    Args:
        level: Log level name; INFO when omitted or unknown.
        format_string: Format string for log messages.
        date_format: Format string for timestamps.
    """
    global _configured

    log_level = _level_from_name(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    if _configured:
        for handler in logger.handlers:
            handler.setLevel(log_level)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter(format_string, datefmt=date_format))
        logger.handlers = [handler]
        logger.propagate = False
        _configured = True

    quiet_library_loggers(logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING)
    return logger


def reset_logging() -> None:
    """Drop the installed handler (used by tests)."""
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)

    _configured = False
