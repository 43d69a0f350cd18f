"""Main entry point for tailorloop."""

import argparse
import asyncio
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

from tailorloop import __version__
from tailorloop.config.settings import Settings
from tailorloop.utils.logging import configure_logging


def _timestamp_run_id(prefix: str) -> str:
    timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}"


def _resolve_run_dir(
    settings: Settings, *, prefix: str, out_run_dir: Path | None
) -> Path:
    if out_run_dir is not None:
        run_dir = out_run_dir
    else:
        run_dir = settings.output_dir / "runs" / _timestamp_run_id(prefix)
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def _read_text(path: Path | None) -> str:
    if path is None:
        return ""
    return path.read_text(encoding="utf-8")


def _write_json(path: Path, payload: object) -> None:
    def _default(value: object):
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        model_dump = getattr(value, "model_dump", None)
        if callable(model_dump):
            return model_dump(mode="json")
        return str(value)

    path.write_text(
        json.dumps(payload, indent=2, default=_default),
        encoding="utf-8",
    )


def _max_cycles(value: str) -> int:
    cycles = int(value)
    if cycles < 0:
        raise argparse.ArgumentTypeError("--resolve must be 0 or greater")
    return cycles


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="tailorloop",
        description="tailorloop: tailor a LaTeX resume to a job description and review it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tailorloop tailor --jd jd.txt --template resume.tex --instructions notes.txt
  python -m tailorloop review --jd jd.txt --document resume.tex --resolve 2
  python -m tailorloop compile resume.tex --name "Jane Doe Resume"
  python -m tailorloop applications update 3 --status Interviewing
  python -m tailorloop profile prompts --stage ats --file ats_prompt.txt
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="modes",
        description="Available commands",
    )

    # tailor
    tailor_parser = subparsers.add_parser(
        "tailor",
        help="Rewrite a template for a job description and score the result",
    )
    tailor_parser.add_argument("--jd", type=Path, required=True, help="Job description text file")
    tailor_parser.add_argument(
        "--template",
        type=Path,
        default=None,
        help="LaTeX resume template (defaults to the stored profile)",
    )
    tailor_parser.add_argument(
        "--instructions",
        type=Path,
        default=None,
        help="Tailoring instructions file (defaults to the stored profile)",
    )
    tailor_parser.add_argument(
        "--cover-letter",
        action="store_true",
        help="Also generate a cover letter from the stored profile",
    )
    tailor_parser.add_argument(
        "--save",
        metavar="COMPANY",
        default=None,
        help="Save the result as an application for COMPANY",
    )
    tailor_parser.add_argument(
        "--out-run-dir",
        type=Path,
        default=None,
        help="Optional output run directory (defaults under artifacts/runs/)",
    )

    # review
    review_parser = subparsers.add_parser(
        "review",
        help="Run the six review stages against a document",
    )
    review_parser.add_argument("--jd", type=Path, required=True, help="Job description text file")
    review_parser.add_argument(
        "--document", type=Path, required=True, help="Merged LaTeX document to review"
    )
    review_parser.add_argument(
        "--template",
        type=Path,
        default=None,
        help="Template used for resolve rewrites (defaults to --document)",
    )
    review_parser.add_argument(
        "--instructions",
        type=Path,
        default=None,
        help="Instructions used for resolve rewrites (defaults to the stored profile)",
    )
    review_parser.add_argument(
        "--resolve",
        type=_max_cycles,
        default=0,
        help="Maximum number of resolve cycles to run while concerns remain",
    )
    review_parser.add_argument(
        "--out-run-dir",
        type=Path,
        default=None,
        help="Optional output run directory (defaults under artifacts/runs/)",
    )

    # compile
    compile_parser = subparsers.add_parser("compile", help="Compile a LaTeX file to PDF")
    compile_parser.add_argument("source", type=Path, help="LaTeX source file")
    compile_parser.add_argument("--name", default=None, help="Output file name")
    compile_parser.add_argument(
        "--out-dir",
        type=Path,
        default=None,
        help="Output directory (defaults to settings output_dir)",
    )

    # insights
    insights_parser = subparsers.add_parser(
        "insights", help="Print quick facts about a job description"
    )
    insights_parser.add_argument("--jd", type=Path, required=True, help="Job description text file")

    # profile
    profile_parser = subparsers.add_parser("profile", help="Show or update the stored profile")
    profile_subparsers = profile_parser.add_subparsers(
        dest="profile_cmd",
        title="profile",
        description="Profile operations",
        required=True,
    )
    profile_subparsers.add_parser("show", help="Print the stored profile as JSON")
    profile_save = profile_subparsers.add_parser("save", help="Update profile fields")
    profile_save.add_argument("--template", type=Path, default=None)
    profile_save.add_argument("--cover-letter-template", type=Path, default=None)
    profile_save.add_argument("--instructions", type=Path, default=None)
    profile_save.add_argument("--cover-letter-instructions", type=Path, default=None)
    profile_save.add_argument("--resume-file-name", default=None)
    profile_save.add_argument("--cover-letter-file-name", default=None)
    profile_save.add_argument("--platform", default=None)
    profile_prompts = profile_subparsers.add_parser(
        "prompts", help="Show or set per-stage review prompt overrides"
    )
    profile_prompts.add_argument("--stage", default=None, help="Stage key, e.g. ats")
    profile_prompts.add_argument(
        "--file", type=Path, default=None, help="Prompt text file (empty file clears the override)"
    )

    # applications
    apps_parser = subparsers.add_parser("applications", help="List and manage saved applications")
    apps_subparsers = apps_parser.add_subparsers(
        dest="applications_cmd",
        title="applications",
        description="Application operations",
        required=True,
    )
    apps_list = apps_subparsers.add_parser("list", help="List applications, newest first")
    apps_list.add_argument("--limit", type=int, default=None)
    apps_show = apps_subparsers.add_parser("show", help="Print one application as JSON")
    apps_show.add_argument("id", type=int)
    apps_update = apps_subparsers.add_parser("update", help="Update status or platform")
    apps_update.add_argument("id", type=int)
    apps_update.add_argument("--status", default=None)
    apps_update.add_argument("--platform", default=None)
    apps_delete = apps_subparsers.add_parser("delete", help="Delete an application")
    apps_delete.add_argument("id", type=int)

    return parser


async def _run_tailor(parsed: argparse.Namespace, settings: Settings) -> int:
    from tailorloop.storage import Application, ProfileStore
    from tailorloop.tailoring import RewriteRequest, TailoringService, compose_instructions
    from tailorloop.tailoring.config import get_tailoring_config

    store = ProfileStore(settings=settings)
    await store.repository.initialize()
    try:
        profile = await store.load()
        config = get_tailoring_config()
        instructions = compose_instructions(
            _read_text(parsed.instructions) or profile.instructions,
            include_length_policy=config.include_length_policy,
        )
        request = RewriteRequest(
            template=_read_text(parsed.template) or profile.resume_template,
            instructions=instructions,
            job_description=_read_text(parsed.jd),
        )

        result = await TailoringService(config=config).tailor(
            request,
            cover_letter_template=profile.cover_letter_template,
            cover_letter_instructions=profile.cover_letter_instructions,
            generate_cover_letter=parsed.cover_letter,
        )
        if not result.success:
            print(result.error or "Tailoring failed", file=sys.stderr)
            return 1

        run_dir = _resolve_run_dir(settings, prefix="tailor", out_run_dir=parsed.out_run_dir)
        resume_path = run_dir / "resume.tex"
        resume_path.write_text(result.document, encoding="utf-8")
        _write_json(run_dir / "scores.json", result.scores)
        print(f"Resume: {resume_path}")
        if result.cover_letter:
            cover_path = run_dir / "cover_letter.tex"
            cover_path.write_text(result.cover_letter, encoding="utf-8")
            print(f"Cover letter: {cover_path}")
        if not result.scores.is_empty:
            print(
                f"ATS score: {result.scores.ats_score} "
                f"Interview likelihood: {result.scores.interview_score}"
            )

        if parsed.save:
            saved = await store.repository.create_application(
                Application(
                    company=parsed.save,
                    platform=profile.current_platform,
                    resume_latex=result.document,
                    cover_letter=result.cover_letter,
                    job_description=request.job_description,
                    ats_score=result.scores.ats_score,
                    interview_score=result.scores.interview_score,
                )
            )
            print(f"Saved application #{saved.id} for {saved.company}")
        return 0
    finally:
        await store.repository.close()


async def _run_review(parsed: argparse.Namespace, settings: Settings) -> int:
    from tailorloop.review import ReviewOrchestrator, get_review_config
    from tailorloop.storage import ProfileStore
    from tailorloop.tailoring import RewriteRequest

    store = ProfileStore(settings=settings)
    await store.repository.initialize()
    try:
        profile = await store.load()
        stage_prompts = {**get_review_config().stage_prompts, **store.load_stage_prompts()}
    finally:
        await store.repository.close()

    document = _read_text(parsed.document)
    job_description = _read_text(parsed.jd)
    request = RewriteRequest(
        template=_read_text(parsed.template) or document,
        instructions=_read_text(parsed.instructions) or profile.instructions,
        job_description=job_description,
    )

    orchestrator = ReviewOrchestrator(stage_prompts=stage_prompts)
    orchestrator.load(document, job_description, request=request)
    await orchestrator.run_all()

    cycles = 0
    while orchestrator.has_concerns and cycles < parsed.resolve:
        cycles += 1
        result = await orchestrator.resolve()
        if result is not None and not result.success:
            print(result.error or "Resolve rewrite failed", file=sys.stderr)
            break

    run_dir = _resolve_run_dir(settings, prefix="review", out_run_dir=parsed.out_run_dir)
    _write_json(run_dir / "review.json", orchestrator.run.to_dict())
    if cycles:
        (run_dir / "resume.tex").write_text(orchestrator.document, encoding="utf-8")

    for stage, pairs in orchestrator.concerns().items():
        print(f"{stage.value}: {len(pairs)} concern(s)")
    print(f"Wrote: {run_dir / 'review.json'}")
    return 0 if orchestrator.is_clean else 2


async def _run_compile(parsed: argparse.Namespace, settings: Settings) -> int:
    from tailorloop.compiler import LatexCompiler

    compiler = LatexCompiler(settings)
    result, path = await compiler.compile_to_file(
        _read_text(parsed.source),
        parsed.name or parsed.source.stem,
        output_dir=parsed.out_dir,
    )
    if not result.success:
        print(result.error, file=sys.stderr)
        if result.details:
            print(result.details, file=sys.stderr)
        if result.log:
            print(result.log, file=sys.stderr)
        return 1
    print(f"Wrote: {path}")
    return 0


async def _run_profile(parsed: argparse.Namespace, settings: Settings) -> int:
    from tailorloop.storage import ProfileStore

    store = ProfileStore(settings=settings)
    await store.repository.initialize()
    try:
        if parsed.profile_cmd == "prompts":
            return _run_stage_prompts(parsed, store)

        profile = await store.load()
        if parsed.profile_cmd == "show":
            print(profile.model_dump_json(indent=2))
            return 0

        updates = {
            "resume_template": _read_text(parsed.template) if parsed.template else None,
            "cover_letter_template": _read_text(parsed.cover_letter_template)
            if parsed.cover_letter_template
            else None,
            "instructions": _read_text(parsed.instructions) if parsed.instructions else None,
            "cover_letter_instructions": _read_text(parsed.cover_letter_instructions)
            if parsed.cover_letter_instructions
            else None,
            "resume_file_name": parsed.resume_file_name,
            "cover_letter_file_name": parsed.cover_letter_file_name,
            "current_platform": parsed.platform,
        }
        updates = {key: value for key, value in updates.items() if value is not None}
        await store.save(profile.model_copy(update=updates))
        print("ok")
        return 0
    finally:
        await store.repository.close()


def _run_stage_prompts(parsed: argparse.Namespace, store) -> int:
    from tailorloop.review.models import Stage

    prompts = store.load_stage_prompts()
    if parsed.stage is None:
        if parsed.file is not None:
            raise ValueError("--file requires --stage")
        print(json.dumps(prompts, indent=2))
        return 0

    stage = Stage(parsed.stage)
    if parsed.file is None:
        print(prompts.get(stage.value, ""))
        return 0

    text = _read_text(parsed.file).strip()
    if text:
        prompts[stage.value] = text
    else:
        prompts.pop(stage.value, None)
    store.save_stage_prompts(prompts)
    print("ok")
    return 0


def _application_summary(application) -> dict:
    return {
        "id": application.id,
        "company": application.company,
        "status": application.status,
        "platform": application.platform,
        "ats_score": application.ats_score,
        "interview_score": application.interview_score,
        "created_at": application.created_at.isoformat(),
    }


async def _run_applications(parsed: argparse.Namespace, settings: Settings) -> int:
    from dataclasses import asdict

    from tailorloop.storage import StorageRepository

    repository = StorageRepository(settings.db_path)
    await repository.initialize()
    try:
        if parsed.applications_cmd == "list":
            applications = await repository.list_applications(limit=parsed.limit)
            print(json.dumps([_application_summary(app) for app in applications], indent=2))
            return 0

        if parsed.applications_cmd == "delete":
            if not await repository.delete_application(parsed.id):
                print(f"Application #{parsed.id} not found", file=sys.stderr)
                return 1
            print(f"Deleted application #{parsed.id}")
            return 0

        if parsed.applications_cmd == "update":
            changes = {
                key: value
                for key, value in (("status", parsed.status), ("platform", parsed.platform))
                if value is not None
            }
            if not changes:
                raise ValueError("Nothing to update; pass --status and/or --platform")
            application = await repository.update_application(parsed.id, **changes)
        else:
            application = await repository.get_application(parsed.id)

        if application is None:
            print(f"Application #{parsed.id} not found", file=sys.stderr)
            return 1
        print(json.dumps(asdict(application), indent=2, default=str))
        return 0
    finally:
        await repository.close()


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level)

    if parsed.mode is None:
        parser.print_help()
        return 0

    logger.info(f"tailorloop v{__version__} starting {parsed.mode}")

    try:
        if parsed.mode == "tailor":
            return asyncio.run(_run_tailor(parsed, settings))

        if parsed.mode == "review":
            return asyncio.run(_run_review(parsed, settings))

        if parsed.mode == "compile":
            return asyncio.run(_run_compile(parsed, settings))

        if parsed.mode == "insights":
            from tailorloop.insights import extract_insights

            insights = extract_insights(_read_text(parsed.jd))
            print(insights.model_dump_json(indent=2))
            return 0

        if parsed.mode == "profile":
            return asyncio.run(_run_profile(parsed, settings))

        if parsed.mode == "applications":
            return asyncio.run(_run_applications(parsed, settings))
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
