import argparse
import dataclasses
from typing import List, Optional

from . import __version__
from .config import LOG_LEVELS, Settings, load_env
from .errors import EnrollSplitError, IOFailureError
from .logger import StructuredLogger
from .parentheses import ParenthesesChecker, resolve_checker_input
from .pipeline import split_enrollments


def build_logger(settings: Settings) -> StructuredLogger:
    try:
        return StructuredLogger(
            level=settings.log_level,
            log_dir=settings.log_dir,
            enable_file=settings.log_to_file,
        )
    except OSError as e:
        raise SystemExit(f"Cannot set up logging in {settings.log_dir}: {e}")


def load_settings(args: argparse.Namespace) -> Settings:
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise SystemExit(f"Invalid configuration: {e}")
    overrides = {}
    if getattr(args, "log_level", None):
        overrides["log_level"] = args.log_level.upper()
    if getattr(args, "skip_malformed", False):
        overrides["skip_malformed"] = True
    return dataclasses.replace(settings, **overrides)


def cmd_split(args: argparse.Namespace) -> None:
    settings = load_settings(args)
    logger = build_logger(settings)

    try:
        outcome = split_enrollments(args.input, args.output_dir, logger=logger, settings=settings)
    except EnrollSplitError as e:
        logger.error(f"Split aborted: {e}", error_type=type(e).__name__)
        logger.log_metrics_summary()
        raise SystemExit(1)

    logger.log_metrics_summary()
    for path in outcome["written"]:
        print(f"Wrote: {path}")
    if outcome["failed"]:
        for company, message in outcome["failed"].items():
            print(f"[error] {company} -> {message}")
        raise SystemExit(1)
    logger.info("Complete")


def cmd_parens(args: argparse.Namespace) -> None:
    settings = load_settings(args)
    logger = build_logger(settings)

    if len(args.values) > 2:
        args.parser.error("expected VALUE or 'string|file' VALUE")
    try:
        text = resolve_checker_input(args.values)
    except IOFailureError as e:
        logger.error(str(e))
        raise SystemExit(1)
    if text is None:
        args.parser.error("first of two arguments must be 'string' or 'file'")

    balanced = ParenthesesChecker(text, logger=logger).is_balanced()
    print("balanced" if balanced else "not balanced")
    if not balanced:
        raise SystemExit(1)


def main(argv: Optional[List[str]] = None) -> None:
    load_env()
    parser = argparse.ArgumentParser(
        prog="enrollsplit",
        description="Split an enrollment file into one deduplicated CSV per insurance company",
    )
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    spl = subparsers.add_parser("split", help="Keep each user's latest record and write one file per insurance company")
    spl.add_argument("input", help="Path to the enrollment CSV")
    spl.add_argument("output_dir", help="Existing directory for the per-company CSV files")
    spl.add_argument("--skip-malformed", action="store_true", help="Log and skip malformed rows instead of aborting")
    spl.add_argument("--log-level", type=str.upper, choices=sorted(LOG_LEVELS), help="Override ENROLLSPLIT_LOG_LEVEL")
    spl.set_defaults(func=cmd_split)

    par = subparsers.add_parser(
        "parens",
        help="Check that parentheses in a string or file are balanced",
        epilog="Put -- before text that starts with a dash, e.g. enrollsplit parens -- '-)('",
    )
    par.add_argument("values", nargs="+", metavar="VALUE", help="Literal text, or 'string TEXT', or 'file PATH' (use -- before text starting with -)")
    par.add_argument("--log-level", type=str.upper, choices=sorted(LOG_LEVELS), help="Override ENROLLSPLIT_LOG_LEVEL")
    par.set_defaults(func=cmd_parens, parser=par)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
