"""Plain-text rendering of LaTeX resumes for reviewers."""

from __future__ import annotations

import re

from tailorloop.document.window import BEGIN_DOCUMENT, END_DOCUMENT

_SUBSTITUTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(?<!\\)%.*"), ""),
    (re.compile(r"\\section\*?\{([^}]*)\}"), r"\1\n"),
    (re.compile(r"\\subsection\*?\{([^}]*)\}"), r"\1\n"),
    (re.compile(r"\\%"), "%"),
    (re.compile(r"\\textbf\{([^}]*)\}"), r"\1"),
    (re.compile(r"\\textit\{([^}]*)\}"), r"\1"),
    (re.compile(r"\\item\s*"), "• "),
    (re.compile(r"\\\\"), "\n"),
    (re.compile(r"\\[a-zA-Z]+\*?(?:\[[^\]]*\])?(?:\{([^}]*)\})?"), r"\1"),
    (re.compile(r"[{}]"), ""),
    (re.compile(r"[ \t]+\n"), "\n"),
    (re.compile(r"\n{3,}"), "\n\n"),
)


def latex_to_text(latex: str) -> str:
    """Strip LaTeX markup down to readable text.

    Only the document body is kept when body anchors are present. Section
    headings become their own lines and ``\\item`` becomes a bullet.
    """
    if not latex:
        return ""

    begin = latex.find(BEGIN_DOCUMENT)
    end = latex.rfind(END_DOCUMENT)
    if begin != -1 and end != -1 and end > begin:
        text = latex[begin + len(BEGIN_DOCUMENT) : end]
    else:
        text = latex

    for pattern, replacement in _SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return text.strip()
