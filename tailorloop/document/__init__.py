"""LaTeX document handling: rewrite windows, merging, plain-text rendering."""

from tailorloop.document.merge import (
    clean_reply,
    extract_marked_output,
    merge_into_template,
    sanitize_output,
)
from tailorloop.document.plaintext import latex_to_text
from tailorloop.document.window import (
    Window,
    WindowMarkers,
    find_body_anchors,
    find_rewrite_window,
)

__all__ = [
    "Window",
    "WindowMarkers",
    "find_body_anchors",
    "find_rewrite_window",
    "merge_into_template",
    "extract_marked_output",
    "sanitize_output",
    "clean_reply",
    "latex_to_text",
]
