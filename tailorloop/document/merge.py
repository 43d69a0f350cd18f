"""Splice rewritten resume bodies back into their LaTeX template."""

from __future__ import annotations

import re

from tailorloop.document.window import (
    BEGIN_DOCUMENT,
    DEFAULT_MARKERS,
    END_DOCUMENT,
    WindowMarkers,
    find_body_anchors,
    find_rewrite_window,
)

DOCUMENT_CLASS = "\\documentclass"

OUTPUT_START = "__OUTPUT_START__"
OUTPUT_END = "__OUTPUT_END__"

_MARKED_OUTPUT_RE = re.compile(
    rf"{OUTPUT_START}([\s\S]*?){OUTPUT_END}", flags=re.IGNORECASE
)


def extract_marked_output(text: str) -> str:
    """Return the content between the output markers, or ``text`` unchanged."""
    match = _MARKED_OUTPUT_RE.search(text)
    if match:
        return match.group(1)
    return text


def sanitize_output(text: str) -> str:
    """Drop any line still carrying an output marker."""
    lines = re.split(r"\r?\n", text)
    return "\n".join(
        line for line in lines if OUTPUT_START not in line and OUTPUT_END not in line
    )


def clean_reply(text: str) -> str:
    """Extract and sanitize the rewritten body from a raw model reply."""
    if not text:
        return ""
    return sanitize_output(extract_marked_output(text))


def has_preamble(document: str, markers: WindowMarkers = DEFAULT_MARKERS) -> bool:
    """Whether a document carries its own shell (class line or body anchors)."""
    return DOCUMENT_CLASS in document or find_body_anchors(document, markers) is not None


def wrap_in_shell(body: str) -> str:
    """Wrap a bare body in a minimal compilable document."""
    return "\n".join(
        ["\\documentclass{article}", BEGIN_DOCUMENT, body, END_DOCUMENT]
    )


def merge_into_template(
    reply: str,
    template: str,
    markers: WindowMarkers = DEFAULT_MARKERS,
) -> str:
    """Merge a rewritten body into the template's rewrite window.

    A reply that is already a full document is returned as-is. A template with
    no shell of its own gets the reply wrapped in a minimal one. Otherwise the
    text outside the window is kept byte for byte and only the window interior
    is replaced.

    Args:
        reply: Cleaned model output.
        template: The user's LaTeX template.
        markers: Anchor markers bounding the window.

    Returns:
        The merged LaTeX document.
    """
    if DOCUMENT_CLASS in reply:
        return reply

    if not has_preamble(template, markers):
        return wrap_in_shell(reply)

    if find_body_anchors(template, markers) is None:
        return reply

    window = find_rewrite_window(template, markers)
    prefix = window.prefix(template)
    suffix = window.suffix(template)

    return "\n\n".join([prefix.rstrip(), reply.strip(), suffix.lstrip()])
