"""Prompt builders for rewrite, scoring, and cover letter calls."""

from __future__ import annotations

from tailorloop.document.merge import OUTPUT_END, OUTPUT_START

_WRAP_DIRECTIVE = f"Return LaTeX only, wrapped between {OUTPUT_START} and {OUTPUT_END}."

REWRITE_SYSTEM_PROMPT = "\n".join(
    [
        "You are a LaTeX resume rewriter. Preserve the template's exact section order, "
        "section names, one-page footprint, and line/bullet counts.",
        "Do NOT add or remove lines, bullets, or sections. Keep the exact count of lines "
        "and `\\\\` line breaks in each rewritten section.",
        "Each rewritten line must be at least as long as the corresponding template line "
        "(allow at most 0-2 characters shorter); if you cannot meet that, copy the "
        "template line verbatim instead of shortening.",
        "Target JD alignment around 80-85%; avoid overfitting by retaining 1-2 original "
        "skills or phrases where needed.",
        "For Projects, avoid numeric metrics; describe scope and responsibilities without "
        "adding numbers or percentages.",
        "If rewriting risks shrinking a line, reuse the template line and only swap in JD "
        "terms while keeping the original length and cadence. Never compress bullets or "
        "merge/split lines.",
        _WRAP_DIRECTIVE,
    ]
)

LENGTH_POLICY = "\n".join(
    [
        "Keep the rewritten resume to exactly one page and the same vertical footprint "
        "as the provided LaTeX template.",
        "Preserve every section, bullet, and line count exactly as in the provided LaTeX; "
        "do not remove, merge, shorten, or reflow lines.",
        "Keep the same number of bullets per role and the same number of lines per "
        "bullet; keep the same number of skill items per group.",
        "If anything risks becoming shorter, expand with JD-relevant, authentic detail "
        "instead of deleting or compressing.",
        "Do not add new sections or spacing; only replace text in-place while keeping "
        "the total line count unchanged.",
    ]
)

SCORING_SYSTEM_PROMPT = (
    "You are an ATS evaluator. Given a job description and the rewritten LaTeX resume, "
    "return a compact JSON object with ATS and interview scores."
)

SCORING_RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "ats_and_interview_scores",
        "strict": True,
        "schema": {
            "type": "object",
            "additionalProperties": False,
            "required": ["ats_score", "ats_reason", "interview_score", "interview_reason"],
            "properties": {
                "ats_score": {"type": "number", "minimum": 0, "maximum": 100},
                "ats_reason": {"type": "string"},
                "interview_score": {"type": "number", "minimum": 0, "maximum": 100},
                "interview_reason": {"type": "string"},
            },
        },
    },
}

COVER_LETTER_SYSTEM_PROMPT = "\n".join(
    [
        "You are a professional cover letter generator.",
        "Rewrite the provided LaTeX cover letter template so it is tightly aligned to the "
        "job description, while preserving the LaTeX structure and one-page footprint.",
        "Do NOT add company location anywhere (header, company block, or body) unless it "
        "is already present in the template. Keep the company block limited to the hiring "
        "manager and company name only.",
        _WRAP_DIRECTIVE,
        "Keep the existing letter environment, addresses, and formatting intact; update "
        "only the content inside the letter to match the JD and provided instructions.",
    ]
)


def build_rewrite_turns(
    *, template: str, instructions: str, job_description: str
) -> tuple[str, ...]:
    """Build the user turns of a rewrite request: template, instructions, JD."""
    return (
        "\n".join(
            [
                "RESUME LATEX TEMPLATE (keep structure, rewrite content only):",
                "-----BEGIN TEMPLATE-----",
                template,
                "-----END TEMPLATE-----",
            ]
        ),
        "\n".join(
            [
                "TAILORING INSTRUCTIONS (highest priority):",
                instructions,
                "",
                "When wording conflicts arise, prioritize JD keywords and alignment over "
                "preserving existing phrasing, while keeping the structure intact.",
                "If a line would become shorter or fewer lines than the template, reuse the "
                "template line and only swap in JD keywords that fit.",
                _WRAP_DIRECTIVE,
            ]
        ),
        "\n".join(["JOB DESCRIPTION (verbatim):", job_description]),
    )


def build_scoring_turn(*, job_description: str, document: str) -> str:
    """Build the user turn of the scoring request."""
    return "\n".join(
        [
            "JOB DESCRIPTION:",
            job_description,
            "",
            "REWRITTEN RESUME (LaTeX):",
            document,
            "",
            'Return JSON exactly as: {"ats_score": number 0-100, "ats_reason": "short reason", '
            '"interview_score": number 0-100, "interview_reason": "short reason"}',
            "Keep reasons to one sentence each.",
        ]
    )


def build_cover_letter_turns(
    *, template: str, instructions: str, job_description: str
) -> tuple[str, ...]:
    """Build the user turns of a cover letter request."""
    return (
        "\n".join(
            [
                "COVER LETTER LATEX TEMPLATE (keep structure, rewrite content inside):",
                "-----BEGIN TEMPLATE-----",
                template,
                "-----END TEMPLATE-----",
            ]
        ),
        "\n".join(
            [
                "COVER LETTER INSTRUCTIONS:",
                instructions,
                "",
                "Prioritize JD keywords, company details, and role alignment within the "
                "existing structure.",
                "Do not add company location anywhere unless the template already contains it.",
            ]
        ),
        "\n".join(["JOB DESCRIPTION (verbatim):", job_description]),
    )
