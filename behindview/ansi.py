"""Terminal control vocabulary and plain-text shaping helpers.

Every escape sequence the dashboard emits is defined here so the renderer,
terminal controller, and tests agree on the exact bytes.
"""

from __future__ import annotations

import re
import unicodedata

ESC = "\x1b"

CUR_HOME = "\x1b[H"
CUR_HIDE = "\x1b[?25l"
CUR_SHOW = "\x1b[?25h"
CLR_SCREEN = "\x1b[2J"
CLR_EOL = "\x1b[K"
CLR_EOS = "\x1b[J"
INVERSE = "\x1b[7m"
RESET = "\x1b[0m"

# X10 button tracking reported in the SGR 1006 extended encoding.
MOUSE_ON = "\x1b[?1000h\x1b[?1006h"
MOUSE_OFF = "\x1b[?1000l\x1b[?1006l"

C_CYAN = "\x1b[1;36m"
C_GREEN = "\x1b[1;32m"
C_YELLOW = "\x1b[1;33m"
C_MAGENTA = "\x1b[1;35m"
C_WHITE = "\x1b[1;37m"
C_GREY = "\x1b[1;30m"

ELLIPSIS = "…"

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?<]*[ -/]*[@-~]")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def strip_ansi(text: str) -> str:
    """Remove CSI sequences, leaving only printable content."""
    return ANSI_ESCAPE_RE.sub("", text)


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns and East Asian wide/fullwidth
    characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def truncate_text(text: str, max_len: int) -> str:
    """Shorten ``text`` to ``max_len`` characters, marking the cut with an ellipsis.

    Text that already fits is returned unchanged; otherwise the result is the
    first ``max_len - 1`` characters followed by ``…``.
    """
    if max_len <= 0:
        return ""
    if len(text) <= max_len:
        return text
    return text[: max_len - 1] + ELLIPSIS
