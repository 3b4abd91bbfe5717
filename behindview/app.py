"""Dashboard composition layer.

Builds the terminal controller, performs the startup fetch, loads repository
data once, and wires decoder, navigation, and renderer into the event loop.
"""

from __future__ import annotations

import logging
import sys
import time

from .ansi import C_CYAN, C_GREY, C_YELLOW, RESET
from .config import Settings
from .input import InputDecoder
from .loop import run_main_loop
from .models import ViewportState
from .navigation import NavigationController
from .provider import GitStatusProvider, StatusProvider
from .render import render_frame, write_frame
from .terminal import TerminalController

logger = logging.getLogger(__name__)

FETCH_WARNING_SECONDS = 2.0


def build_provider(settings: Settings, interactive: bool = True) -> GitStatusProvider:
    return GitStatusProvider(
        settings.repo_path,
        git_dir=settings.git_dir,
        work_tree=settings.work_tree,
        remote=settings.remote,
        title=settings.title,
        timeout_seconds=settings.timeout_seconds,
        interactive=interactive,
    )


def _announce_fetch(settings: Settings, provider: StatusProvider, out) -> None:
    """Run the startup fetch in cooked mode so credential prompts still work."""
    out.write(f"\n{C_CYAN}Fetching updates from {settings.remote}...{RESET}\n")
    out.write(f"{C_GREY}(If prompted, enter your SSH key passphrase){RESET}\n\n")
    out.flush()
    result = provider.fetch(settings.timeout_seconds)
    if not result.ok:
        out.write(f"{C_YELLOW}[WARNING] Fetch failed or timed out.{RESET}\n")
        out.flush()
        time.sleep(FETCH_WARNING_SECONDS)


def run_dashboard(
    settings: Settings,
    provider: StatusProvider | None = None,
    terminal: TerminalController | None = None,
    out=None,
) -> None:
    """Run the interactive dashboard until the user quits.

    Raises ``TerminalUnavailable`` before any output when stdin/stdout are not
    a terminal; the caller reports it.
    """
    out = out if out is not None else sys.stdout
    if terminal is None:
        terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    if provider is None:
        provider = build_provider(settings, interactive=True)

    _announce_fetch(settings, provider, out)

    status = provider.load_status()
    commits = provider.list_commits()
    logger.info(
        "loaded %d rows (local=%d remote=%d behind=%d)",
        len(commits),
        status.local_rev_count,
        status.remote_rev_count,
        status.behind_count,
    )

    viewport = ViewportState()
    controller = NavigationController(viewport, total=len(commits), max_rows=settings.max_rows)
    decoder = InputDecoder(terminal.stdin_fd)

    def draw() -> None:
        lines = render_frame(
            viewport,
            commits,
            status,
            max_rows=settings.max_rows,
            title=settings.title,
            repo_label=settings.repo_label,
        )
        write_frame(terminal.stdout_fd, lines)

    run_main_loop(terminal, decoder, controller, draw)
