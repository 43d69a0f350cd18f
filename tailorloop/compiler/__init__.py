"""Document compiler service (LaTeX to PDF)."""

from tailorloop.compiler.latex import (
    CompilationError,
    CompileResult,
    LatexCompiler,
    sanitize_filename,
)

__all__ = ["LatexCompiler", "CompileResult", "CompilationError", "sanitize_filename"]
