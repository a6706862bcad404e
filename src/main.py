# src/main.py — v1
"""CLI entry point — run, export-config, validate-config, models commands.

Usage:
    reviewchain run <input_file> [options]
    reviewchain export-config <output_file> [--config FILE]
    reviewchain validate-config <file>
    reviewchain models
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from reviewchain.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="reviewchain",
        description=f"reviewchain v{__version__} — Sequential multi-agent review pipeline",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- run ---
    p_run = subparsers.add_parser(
        "run", help="Run the pipeline on a seed text file",
    )
    p_run.add_argument("input", type=Path, help="Seed text file for the first step")
    p_run.add_argument(
        "-c", "--config", type=Path, default=None,
        help="Step configuration JSON (default: built-in review pipeline)",
    )
    p_run.add_argument(
        "--until", type=int, default=None,
        help="Last step position to run, 0-based (default: all steps)",
    )
    p_run.add_argument(
        "--mana", type=int, default=None,
        help="Starting mana (default: INITIAL_MANA setting)",
    )
    p_run.add_argument(
        "--keep-going", action="store_true",
        help="Continue with later steps after a failure",
    )
    p_run.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Write the session report as JSON to this file",
    )
    p_run.set_defaults(func=_cmd_run)

    # --- export-config ---
    p_export = subparsers.add_parser(
        "export-config", help="Write the step configuration as JSON",
    )
    p_export.add_argument("output", type=Path, help="Destination file")
    p_export.add_argument(
        "-c", "--config", type=Path, default=None,
        help="Configuration to re-export (default: built-in review pipeline)",
    )
    p_export.set_defaults(func=_cmd_export_config)

    # --- validate-config ---
    p_validate = subparsers.add_parser(
        "validate-config", help="Check that a configuration file imports",
    )
    p_validate.add_argument("file", type=Path, help="Configuration JSON file")
    p_validate.set_defaults(func=_cmd_validate_config)

    # --- models ---
    p_models = subparsers.add_parser(
        "models", help="List selectable models and their providers",
    )
    p_models.set_defaults(func=_cmd_models)

    return parser


async def _cmd_run(args: argparse.Namespace) -> int:
    """Run the pipeline on the seed text."""
    from reviewchain.api.facade import ReviewSession
    from reviewchain.config.settings import Settings
    from reviewchain.pipeline.errors import SerializationError

    input_path: Path = args.input
    if not input_path.exists():
        logger.error("File not found: %s", input_path)
        return 1

    settings = Settings()
    if args.mana is not None:
        settings = settings.model_copy(update={"initial_mana": args.mana})

    session = ReviewSession(settings=settings)
    if args.config is not None:
        try:
            session.load_config(args.config)
        except SerializationError as exc:
            logger.error("Invalid configuration %s: %s", args.config, exc)
            return 1

    session.seed_text = input_path.read_text(encoding="utf-8")
    last = len(session.configs) - 1 if args.until is None else args.until
    if not 0 <= last < len(session.configs):
        logger.error("--until must be between 0 and %d", len(session.configs) - 1)
        return 1

    outcomes = []
    try:
        for idx in range(last + 1):
            outcome = await session.run_step(idx)
            outcomes.append(outcome)
            if not outcome.success and not args.keep_going:
                break
    finally:
        await session.aclose()

    report = session.report()
    _print_report(report)
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(report.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Report written to %s", args.output)

    return 0 if outcomes and all(o.success for o in outcomes) else 1


async def _cmd_export_config(args: argparse.Namespace) -> int:
    """Write the default (or a re-validated) configuration."""
    from reviewchain.config.defaults import default_pipeline
    from reviewchain.pipeline.errors import SerializationError
    from reviewchain.pipeline.serializer import ConfigSerializer

    serializer = ConfigSerializer()
    try:
        configs = (
            serializer.load_file(args.config)
            if args.config is not None
            else default_pipeline()
        )
    except SerializationError as exc:
        logger.error("Invalid configuration %s: %s", args.config, exc)
        return 1
    path = serializer.save_file(args.output, configs)
    print(f"Wrote {len(configs)} steps to {path}")
    return 0


async def _cmd_validate_config(args: argparse.Namespace) -> int:
    """Report whether a configuration file imports."""
    from reviewchain.pipeline.errors import SerializationError
    from reviewchain.pipeline.serializer import ConfigSerializer

    try:
        configs = ConfigSerializer().load_file(args.file)
    except SerializationError as exc:
        print(f"INVALID: {exc}")
        return 1
    print(f"OK: {len(configs)} steps")
    for idx, config in enumerate(configs):
        print(f"  {idx}. {config.id} — {config.name} ({config.provider}:{config.model})")
    return 0


async def _cmd_models(args: argparse.Namespace) -> int:
    """List the model catalog grouped by provider."""
    from reviewchain.config.settings import PROVIDER_NAMES
    from reviewchain.llm.catalog import models_for_provider

    for provider in PROVIDER_NAMES:
        print(f"{provider}:")
        for info in models_for_provider(provider):
            print(f"  {info.id:28s} {info.name}")
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    """Configure logging from settings; --verbose forces DEBUG."""
    from reviewchain.config.settings import ConfigurationError, Settings
    from reviewchain.logging.logger import setup_logging

    try:
        settings = Settings()
    except (ConfigurationError, ValueError) as exc:
        setup_logging(level="DEBUG" if verbose else "INFO")
        logger.warning("Ignoring invalid settings for logging: %s", exc)
        return
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


def _print_report(report) -> None:
    """Print a human-readable session summary."""
    print(f"\n{'=' * 60}")
    print(f"  Session: {report.session_id}")
    print(f"  Mana:    {report.mana}    Experience: {report.experience}")
    print(f"{'=' * 60}")
    for step in report.steps:
        line = f"  {step.position}. [{step.status.upper():9s}] {step.name}"
        if step.error:
            line += f" — {step.error_tag}: {step.error}"
        print(line)
    finished = [s for s in report.steps if s.status == "completed" and s.output]
    if finished:
        last = finished[-1]
        print(f"\n--- Output of {last.name} ---\n{last.output}")
    print()


if __name__ == "__main__":
    sys.exit(main())
