"""Tests for LaTeX to plain text conversion."""

from tailorloop.document.plaintext import latex_to_text


def test_empty_input():
    assert latex_to_text("") == ""


def test_keeps_only_document_body(sample_template):
    text = latex_to_text(sample_template)
    assert "documentclass" not in text
    assert "Jane Doe" in text
    assert "Objective" in text


def test_items_become_bullets():
    text = latex_to_text("\\begin{itemize}\\item First\n\\item Second\\end{itemize}")
    assert "• First" in text
    assert "• Second" in text


def test_comments_are_removed_but_escaped_percent_kept():
    text = latex_to_text("Grew revenue 20\\% % internal note\nNext line")
    assert "20%" in text
    assert "internal note" not in text
    assert "Next line" in text


def test_formatting_commands_unwrapped():
    assert latex_to_text("\\textbf{Bold} and \\textit{italic}") == "Bold and italic"


def test_line_breaks_and_blank_runs_collapsed():
    text = latex_to_text("one\\\\two\n\n\n\nthree")
    assert text == "one\ntwo\n\nthree"
