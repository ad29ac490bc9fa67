"""
Command-line entry point.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from . import __version__
from .config import Settings
from .logging_config import setup_logging
from .orchestrator import run_upgrade
from .prompts import Prompter, TerminalPrompter
from .registry import DEFAULT_REGISTRY
from .render import Progress, print_result


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="up",
        description="Check and upgrade globally installed npm, pnpm, yarn and bun packages.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  up          # pick packages to upgrade interactively\n"
            "  up --all    # upgrade everything that is outdated\n"
        ),
    )
    parser.add_argument(
        "-a", "--all",
        action="store_true",
        help="Upgrade all packages without prompting",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write a full debug log to PATH",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Timeout for package manager commands and registry requests, 1-600 seconds (default: none)",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=8,
        metavar="N",
        help="Maximum parallel registry lookups, 1-32 (default: 8)",
    )
    parser.add_argument(
        "--registry",
        default=DEFAULT_REGISTRY,
        metavar="URL",
        help=f"Registry used to look up latest versions (default: {DEFAULT_REGISTRY})",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: Sequence[str] | None = None, prompter: Prompter | None = None) -> int:
    """
    Parse arguments, run the upgrade flow and return the exit code.
    """
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        settings = Settings.from_args(args)
    except ValueError as e:
        logger.error(str(e))
        return 1

    progress = Progress()
    try:
        result = run_upgrade(settings, prompter or TerminalPrompter(), progress)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1

    print_result(result, use_color=progress.use_color)
    logger.debug(f"Run result: {result.to_dict()}")
    return result.exit_code


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
