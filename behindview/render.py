"""Rendering for the commit dashboard.

Builds a fixed-height frame from viewport state and repository data, then
writes it to the terminal in a single call so redraws do not flicker.
"""

from __future__ import annotations

import os
from collections.abc import Sequence

from .ansi import (
    C_CYAN,
    C_GREEN,
    C_GREY,
    C_MAGENTA,
    C_WHITE,
    CLR_EOL,
    CLR_EOS,
    CUR_HOME,
    INVERSE,
    RESET,
    display_width,
)
from .models import Commit, RepoStatus, ViewportState
from .provider import BOX_INNER_WIDTH, ITEM_PADDING

# Top border, title, status, bottom border.
HEADER_ROWS = 4
# Blank separator, help line, repository footer.
FOOTER_ROWS = 3
# 1-based screen row of the first list line (header plus the upper indicator).
LIST_START_ROW = HEADER_ROWS + 2

HELP_TEXT = " [↑↓/jk] Move  [PgUp/Dn] Page  [g/G] Start/End  [q] Quit"
MORE_ABOVE = "    ▲ (more above)"
MORE_BELOW = "    ▼ (more below)"
SELECTED_MARKER = " ➤ "
UNSELECTED_MARKER = "    "


def status_text(commits: Sequence[Commit]) -> str:
    if commits and commits[0].is_up_to_date:
        return "Status: Up to date"
    if commits and commits[0].is_error:
        return "Status: Load error"
    return f"Commits Behind: {len(commits)}"


def _header_lines(title: str, status: RepoStatus, commits: Sequence[Commit], box_width: int) -> list[str]:
    h_line = "─" * box_width
    revisions = f"Local: #{status.local_rev_count} vs Remote: #{status.remote_rev_count}"
    raw_width = display_width(f"{title} {revisions}")
    lpad = max(0, (box_width - raw_width) // 2)
    rpad = max(0, box_width - raw_width - lpad)
    stats = status_text(commits)
    stats_pad = max(0, box_width - len(stats) - 1)
    return [
        f"{C_MAGENTA}┌{h_line}┐{RESET}",
        f"{C_MAGENTA}│{' ' * lpad}{C_WHITE}{title} {C_GREY}{revisions}{C_WHITE}{' ' * rpad}{C_MAGENTA}│{RESET}",
        f"{C_MAGENTA}│ {C_GREEN}{stats}{' ' * stats_pad}{C_MAGENTA}│{RESET}",
        f"{C_MAGENTA}└{h_line}┘{RESET}",
    ]


def _commit_line(commit: Commit, selected: bool, item_padding: int) -> str:
    padded_hash = commit.hash.ljust(item_padding)
    if selected:
        return (
            f"{C_CYAN}{SELECTED_MARKER}{INVERSE}{padded_hash}{RESET} : "
            f"{C_WHITE}{commit.subject}{RESET}{CLR_EOL}"
        )
    return f"{UNSELECTED_MARKER}{C_GREY}{padded_hash}{RESET} : {C_GREY}{commit.subject}{RESET}{CLR_EOL}"


def _lower_indicator(viewport: ViewportState, total: int, visible_end: int, max_rows: int) -> str:
    if total <= max_rows:
        return CLR_EOL
    position = f"[{viewport.selected + 1}/{total}]"
    if visible_end < total:
        return f"{C_GREY}{MORE_BELOW} {position}{CLR_EOL}{RESET}"
    return f"{C_GREY}{' ' * (len(MORE_BELOW) + 1)}{position}{CLR_EOL}{RESET}"


def render_frame(
    viewport: ViewportState,
    commits: Sequence[Commit],
    status: RepoStatus,
    *,
    max_rows: int,
    title: str,
    repo_label: str,
    box_width: int = BOX_INNER_WIDTH,
    item_padding: int = ITEM_PADDING,
) -> list[str]:
    """Return the dashboard as a fixed number of styled lines for ``max_rows``.

    The function does not touch the terminal and does not mutate ``viewport``;
    callers are expected to have reconciled the scroll position already.
    """
    total = len(commits)
    lines = _header_lines(title, status, commits, box_width)

    if viewport.scroll_offset > 0:
        lines.append(f"{C_GREY}{MORE_ABOVE}{CLR_EOL}{RESET}")
    else:
        lines.append(CLR_EOL)

    visible_start = min(viewport.scroll_offset, total)
    visible_end = min(visible_start + max_rows, total)
    for idx in range(visible_start, visible_end):
        lines.append(_commit_line(commits[idx], idx == viewport.selected, item_padding))
    for _ in range(max_rows - (visible_end - visible_start)):
        lines.append(CLR_EOL)

    lines.append(_lower_indicator(viewport, total, visible_end, max_rows))

    lines.append(CLR_EOL)
    lines.append(f"{C_CYAN}{HELP_TEXT}{RESET}{CLR_EOL}")
    lines.append(f"{C_CYAN} Repo: {C_WHITE}{repo_label}{RESET}{CLR_EOL}")
    return lines


def compose_frame(lines: Sequence[str]) -> str:
    """Join frame lines into one redraw payload starting at the home position.

    Raw mode disables output post-processing, so rows are separated with CRLF.
    """
    return CUR_HOME + "\r\n".join(lines) + CLR_EOS


def write_frame(fd: int, lines: Sequence[str]) -> None:
    os.write(fd, compose_frame(lines).encode("utf-8", errors="replace"))
