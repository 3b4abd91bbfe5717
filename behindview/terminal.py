"""Terminal control helpers for the dashboard session.

Owns raw-mode lifecycle, mouse tracking, cursor visibility, and the signal
handlers that guarantee the terminal is restored on every exit path.
"""

from __future__ import annotations

import contextlib
import logging
import os
import signal
import termios
import tty

from .ansi import CLR_SCREEN, CUR_HIDE, CUR_HOME, CUR_SHOW, MOUSE_OFF, MOUSE_ON, RESET
from .errors import TerminalUnavailable

logger = logging.getLogger(__name__)

EXIT_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGHUP)


def _exit_on_signal(signum: int, _frame: object) -> None:
    """Turn a termination signal into ``SystemExit`` so cleanup runs."""
    raise SystemExit(128 + signum)


class TerminalController:
    """Manage terminal mode transitions for the interactive dashboard."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state; raise ``TerminalUnavailable`` when not interactive."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        if not os.isatty(stdin_fd) or not os.isatty(stdout_fd):
            raise TerminalUnavailable("stdin and stdout must be an interactive terminal")
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error as exc:
            raise TerminalUnavailable(f"cannot read terminal attributes: {exc}") from exc
        self._tui_active = False

    def enable_tui_mode(self) -> None:
        """Enter raw mode with mouse reporting enabled and the cursor hidden."""
        try:
            tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        except termios.error as exc:
            raise TerminalUnavailable(f"cannot enable raw mode: {exc}") from exc
        self._tui_active = True
        os.write(self.stdout_fd, f"{MOUSE_ON}{CUR_HIDE}{CLR_SCREEN}{CUR_HOME}".encode("ascii"))

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state; safe to call more than once."""
        if not self._tui_active:
            return
        self._tui_active = False
        # Disable mouse reporting, show cursor, reset attributes, leave the frame visible.
        # A hung-up terminal fails the write; the tty attributes are restored regardless.
        with contextlib.suppress(OSError):
            os.write(self.stdout_fd, f"{MOUSE_OFF}{CUR_SHOW}{RESET}\r\n".encode("ascii"))
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        except termios.error as exc:
            logger.warning("cannot restore terminal attributes: %s", exc)

    @contextlib.contextmanager
    def exit_signal_handlers(self):
        """Route SIGINT/SIGTERM/SIGHUP through ``SystemExit`` while active."""
        previous = {}
        for signum in EXIT_SIGNALS:
            previous[signum] = signal.signal(signum, _exit_on_signal)
        try:
            yield
        finally:
            for signum, handler in previous.items():
                signal.signal(signum, handler)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        with self.exit_signal_handlers():
            try:
                self.enable_tui_mode()
                yield
            finally:
                self.disable_tui_mode()
                logger.debug("terminal restored")
