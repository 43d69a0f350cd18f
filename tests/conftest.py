"""Pytest configuration and shared fixtures."""

import pytest

SAMPLE_TEMPLATE = "\n".join(
    [
        "\\documentclass{article}",
        "\\begin{document}",
        "\\textbf{Jane Doe}",
        "\\section*{Objective}",
        "Backend engineer.",
        "\\section*{Experience}",
        "\\item Built services.",
        "\\section*{Education}",
        "B.Sc. Computer Science",
        "\\end{document}",
    ]
)


@pytest.fixture
def sample_template() -> str:
    """A small LaTeX resume template with both window markers."""
    return SAMPLE_TEMPLATE


@pytest.fixture
def sample_job_description() -> str:
    return "Senior Python Engineer. Requirements: asyncio, PostgreSQL, 5+ years."
