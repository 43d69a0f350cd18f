"""LaTeX to PDF compilation.

Each compilation runs the configured LaTeX engine (tectonic by default) in a
fresh temporary directory that is removed when the call returns, whatever the
outcome.
"""

from __future__ import annotations

import asyncio
import logging
import re
import tempfile
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from tailorloop.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_BASENAME = "resume"
SOURCE_NAME = "resume.tex"


class CompilationError(Exception):
    """Raised when the LaTeX engine fails; carries the engine's stderr."""

    def __init__(self, message: str, log: str = "", returncode: int | None = None):
        super().__init__(message)
        self.log = log
        self.returncode = returncode


@dataclass
class CompileResult:
    """Result of a compilation."""

    success: bool
    pdf: bytes | None = None
    filename: str | None = None
    error: str | None = None
    details: str | None = None
    log: str | None = None
    compiled_at: datetime = field(default_factory=datetime.now)


def sanitize_filename(raw: str | None) -> str:
    """Reduce a requested file name to a safe ASCII base name (no extension)."""
    if not raw:
        return DEFAULT_BASENAME
    trimmed = re.sub(r"\.pdf$", "", raw, flags=re.IGNORECASE).strip()
    if not trimmed:
        return DEFAULT_BASENAME

    ascii_name = unicodedata.normalize("NFKD", trimmed)
    ascii_name = re.sub(r"[^\x00-\x7F]", "-", ascii_name)
    ascii_name = re.sub(r"[^A-Za-z0-9._-]+", "-", ascii_name)
    ascii_name = re.sub(r"-+", "-", ascii_name)
    ascii_name = ascii_name.strip("-")
    return ascii_name or DEFAULT_BASENAME


def truncate_log(log: str | None, limit: int) -> str | None:
    if log and len(log) > limit:
        return f"{log[:limit]}…"
    return log


class LatexCompiler:
    """Compile LaTeX documents to PDF bytes."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    async def _run_engine(self, tex_path: Path, out_dir: Path) -> None:
        try:
            proc = await asyncio.create_subprocess_exec(
                self.settings.compiler_command,
                "--outdir",
                str(out_dir),
                str(tex_path),
                cwd=str(out_dir),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CompilationError(
                f"Could not start {self.settings.compiler_command}: {e}"
            ) from e

        try:
            _, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.settings.compiler_timeout
            )
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise CompilationError(
                f"{self.settings.compiler_command} timed out after "
                f"{self.settings.compiler_timeout}s"
            ) from e

        log = stderr.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            raise CompilationError(
                f"{self.settings.compiler_command} exited with code {proc.returncode}",
                log=log,
                returncode=proc.returncode,
            )

    async def compile(self, latex: str, filename: str | None = None) -> CompileResult:
        """Compile ``latex`` to a PDF.

        Args:
            latex: Full LaTeX source.
            filename: Requested output name; sanitized, ``.pdf`` appended.

        Returns:
            CompileResult with the PDF bytes, or the error and a bounded log.
        """
        if not latex:
            return CompileResult(success=False, error="Missing LaTeX content to compile.")

        safe_name = f"{sanitize_filename(filename)}.pdf"

        with tempfile.TemporaryDirectory(prefix="latex-compile-") as tmp:
            work_dir = Path(tmp)
            tex_path = work_dir / SOURCE_NAME
            pdf_path = tex_path.with_suffix(".pdf")
            try:
                tex_path.write_text(latex, encoding="utf-8")
                await self._run_engine(tex_path, work_dir)
                pdf = pdf_path.read_bytes()
            except CompilationError as e:
                logger.error(f"Failed to compile LaTeX: {e}")
                return CompileResult(
                    success=False,
                    filename=safe_name,
                    error="PDF compilation failed.",
                    details=str(e),
                    log=truncate_log(e.log, self.settings.compiler_log_limit),
                )
            except OSError as e:
                logger.error(f"Failed to compile LaTeX: {e}")
                return CompileResult(
                    success=False,
                    filename=safe_name,
                    error="PDF compilation failed.",
                    details=str(e),
                )

        logger.info(f"Compiled {safe_name} ({len(pdf)} bytes)")
        return CompileResult(success=True, pdf=pdf, filename=safe_name)

    async def compile_to_file(
        self, latex: str, filename: str | None = None, output_dir: Path | None = None
    ) -> tuple[CompileResult, Path | None]:
        """Compile and write the PDF under ``output_dir`` (settings.output_dir)."""
        result = await self.compile(latex, filename)
        if not result.success or result.pdf is None:
            return result, None
        target_dir = output_dir or self.settings.output_dir
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / result.filename
        path.write_bytes(result.pdf)
        return result, path
