"""Command-line front door for behindview.

Parses CLI options, resolves settings from the config file, and dispatches
into either the interactive dashboard or the background check.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .config import CONFIG_PATH, load_settings
from .errors import TerminalUnavailable
from .logs import setup_logging

logger = logging.getLogger(__name__)

MIN_PYTHON = (3, 9)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="behindview",
        description="Browse the commits your branch is behind its upstream.",
    )
    parser.add_argument(
        "--num",
        "--check",
        dest="background",
        action="store_true",
        help="Run the background check: fetch, record the behind count, notify when over the threshold.",
    )
    parser.add_argument("--config", type=Path, default=None, help=f"Config file (default: {CONFIG_PATH}).")
    parser.add_argument("--repo", type=Path, default=None, help="Repository path (default: current directory).")
    parser.add_argument("--git-dir", type=Path, default=None, help="Git directory of a bare repository.")
    parser.add_argument("--work-tree", type=Path, default=None, help="Work tree used with --git-dir.")
    parser.add_argument("--remote", default=None, help="Remote to fetch from (default: origin).")
    parser.add_argument("--title", default=None, help="Dashboard and notification title.")
    parser.add_argument("--threshold", type=_positive_int, default=None, help="Notify at this many commits behind.")
    parser.add_argument("--timeout", type=_positive_float, default=None, help="Seconds allowed per git call.")
    parser.add_argument("--max-rows", type=_positive_int, default=None, help="Visible list rows.")
    parser.add_argument("--state-file", type=Path, default=None, help="File that stores the behind count.")
    parser.add_argument("--verbose", action="store_true", help="Also log to stderr (background check only).")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run the selected mode, and return the exit status."""
    if sys.version_info < MIN_PYTHON:
        found = ".".join(str(part) for part in sys.version_info[:3])
        required = ".".join(str(part) for part in MIN_PYTHON)
        print(f"behindview: Python {required}+ required (found {found})", file=sys.stderr)
        return 1

    args = build_parser().parse_args(argv)
    settings = load_settings(args.config).with_overrides(
        repo_path=args.repo,
        git_dir=args.git_dir,
        work_tree=args.work_tree,
        remote=args.remote,
        title=args.title,
        notify_threshold=args.threshold,
        timeout_seconds=args.timeout,
        max_rows=args.max_rows,
        state_file=args.state_file,
    )
    setup_logging(settings.log_file, verbose=args.verbose and args.background)

    if args.background:
        from .app import build_provider
        from .notify import DesktopNotifier
        from .poller import run_background_check
        from .state_file import BehindCountStore

        result = run_background_check(
            build_provider(settings, interactive=False),
            BehindCountStore(settings.state_file),
            DesktopNotifier(),
            threshold=settings.notify_threshold,
            title=settings.title,
            timeout=settings.timeout_seconds,
        )
        logger.info("background check finished: %s", result)
        return 0

    from .app import run_dashboard

    try:
        run_dashboard(settings)
    except TerminalUnavailable as exc:
        logger.error("cannot start dashboard: %s", exc)
        print(f"behindview: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
