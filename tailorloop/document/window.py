"""Rewrite window extraction for LaTeX resume templates.

The window is the span of a document a model rewrite is allowed to replace.
Everything before ``prefix_end`` (preamble, header, the first section heading)
and everything from ``suffix_start`` on (trailing sections, ``\\end{document}``)
is reproduced verbatim by the merger.
"""

from __future__ import annotations

from dataclasses import dataclass

BEGIN_DOCUMENT = "\\begin{document}"
END_DOCUMENT = "\\end{document}"

# First match in this order wins.
LEADING_MARKERS: tuple[str, ...] = (
    "\\section*{Objective}",
    "\\section*{Technical Skills}",
)
TRAILING_MARKERS: tuple[str, ...] = ("\\section*{Education}",)


@dataclass(frozen=True)
class WindowMarkers:
    """Anchor markers used to bound the rewrite window."""

    begin: str = BEGIN_DOCUMENT
    end: str = END_DOCUMENT
    leading: tuple[str, ...] = LEADING_MARKERS
    trailing: tuple[str, ...] = TRAILING_MARKERS


DEFAULT_MARKERS = WindowMarkers()


@dataclass(frozen=True)
class Window:
    """Offsets of the rewritable span: ``document[prefix_end:suffix_start]``."""

    prefix_end: int
    suffix_start: int

    def prefix(self, document: str) -> str:
        return document[: self.prefix_end]

    def body(self, document: str) -> str:
        return document[self.prefix_end : self.suffix_start]

    def suffix(self, document: str) -> str:
        return document[self.suffix_start :]


def find_body_anchors(
    document: str, markers: WindowMarkers = DEFAULT_MARKERS
) -> tuple[int, int] | None:
    """Return ``(begin, end)`` offsets of the outermost body anchors.

    ``None`` when either anchor is missing or the end anchor does not follow
    the begin anchor.
    """
    begin = document.find(markers.begin)
    end = document.rfind(markers.end)
    if begin == -1 or end == -1 or end <= begin:
        return None
    return begin, end


def find_rewrite_window(
    document: str, markers: WindowMarkers = DEFAULT_MARKERS
) -> Window:
    """Compute the rewrite window of a document.

    Documents without well-formed body anchors degenerate to a window covering
    the entire text.

    Args:
        document: Full LaTeX source.
        markers: Anchor markers to search for.

    Returns:
        The Window bounding the rewritable body.
    """
    anchors = find_body_anchors(document, markers)
    if anchors is None:
        return Window(prefix_end=0, suffix_start=len(document))

    begin, end = anchors
    body_start = begin + len(markers.begin)

    prefix_end = body_start
    for marker in markers.leading:
        index = document.find(marker, body_start, end)
        if index != -1:
            prefix_end = index + len(marker)
            break

    suffix_start = end
    for marker in markers.trailing:
        index = document.find(marker, body_start, end)
        # Only the first occurrence counts, and only when it follows the prefix.
        if index >= prefix_end:
            suffix_start = index
            break

    return Window(prefix_end=prefix_end, suffix_start=suffix_start)
