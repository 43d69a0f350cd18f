"""Tests for the LaTeX compiler."""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from tailorloop.compiler.latex import LatexCompiler, sanitize_filename, truncate_log
from tailorloop.config.settings import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(_env_file=None, output_dir=tmp_path / "out", compiler_log_limit=50)


def fake_engine(returncode: int = 0, stderr: bytes = b"", pdf: bytes | None = b"%PDF-1.7"):
    """create_subprocess_exec double that writes a PDF into --outdir."""
    seen: dict = {}

    async def create(*args, **kwargs):
        seen["args"] = args
        out_dir = Path(args[2])
        seen["out_dir"] = out_dir
        seen["source"] = Path(args[3]).read_text(encoding="utf-8")
        if pdf is not None and returncode == 0:
            (out_dir / "resume.pdf").write_bytes(pdf)
        proc = MagicMock()
        proc.returncode = returncode
        proc.communicate = AsyncMock(return_value=(b"", stderr))
        return proc

    return create, seen


class TestSanitizeFilename:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, "resume"),
            ("", "resume"),
            (".pdf", "resume"),
            ("Jane Doe Resume.pdf", "Jane-Doe-Resume"),
            ("résumé/../../etc", "re-sume-..-..-etc"),
            ("CV_2024.v2", "CV_2024.v2"),
            ("***", "resume"),
        ],
    )
    def test_sanitize(self, raw, expected):
        assert sanitize_filename(raw) == expected


def test_truncate_log():
    assert truncate_log("abc", 5) == "abc"
    assert truncate_log("abcdef", 3) == "abc…"
    assert truncate_log(None, 3) is None


class TestCompile:
    @pytest.mark.asyncio
    async def test_success_returns_pdf_and_cleans_up(self, settings):
        create, seen = fake_engine()
        with patch(
            "tailorloop.compiler.latex.asyncio.create_subprocess_exec",
            side_effect=create,
        ):
            result = await LatexCompiler(settings).compile("\\documentclass{article}", "My CV")

        assert result.success is True
        assert result.pdf == b"%PDF-1.7"
        assert result.filename == "My-CV.pdf"
        assert seen["args"][0] == "tectonic"
        assert seen["args"][1] == "--outdir"
        assert seen["source"] == "\\documentclass{article}"
        assert not seen["out_dir"].exists()

    @pytest.mark.asyncio
    async def test_failure_truncates_log(self, settings):
        create, seen = fake_engine(returncode=1, stderr=b"x" * 200)
        with patch(
            "tailorloop.compiler.latex.asyncio.create_subprocess_exec",
            side_effect=create,
        ):
            result = await LatexCompiler(settings).compile("\\bad", None)

        assert result.success is False
        assert result.error == "PDF compilation failed."
        assert result.log == "x" * 50 + "…"
        assert "exited with code 1" in result.details
        assert not seen["out_dir"].exists()

    @pytest.mark.asyncio
    async def test_missing_engine(self, settings):
        with patch(
            "tailorloop.compiler.latex.asyncio.create_subprocess_exec",
            side_effect=FileNotFoundError("tectonic"),
        ):
            result = await LatexCompiler(settings).compile("\\documentclass{article}")

        assert result.success is False
        assert "Could not start tectonic" in result.details

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self, settings):
        proc = MagicMock()
        proc.communicate = AsyncMock(side_effect=asyncio.TimeoutError())
        proc.wait = AsyncMock()
        with patch(
            "tailorloop.compiler.latex.asyncio.create_subprocess_exec",
            AsyncMock(return_value=proc),
        ):
            result = await LatexCompiler(settings).compile("\\documentclass{article}")

        assert result.success is False
        assert "timed out" in result.details
        proc.kill.assert_called_once()

    @pytest.mark.asyncio
    async def test_empty_source_rejected(self, settings):
        result = await LatexCompiler(settings).compile("")
        assert result.success is False
        assert result.error == "Missing LaTeX content to compile."

    @pytest.mark.asyncio
    async def test_compile_to_file(self, settings):
        create, _ = fake_engine()
        with patch(
            "tailorloop.compiler.latex.asyncio.create_subprocess_exec",
            side_effect=create,
        ):
            result, path = await LatexCompiler(settings).compile_to_file("\\x", "cv")

        assert result.success
        assert path == settings.output_dir / "cv.pdf"
        assert path.read_bytes() == b"%PDF-1.7"
