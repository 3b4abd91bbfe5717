"""Error taxonomy shared by the provider, decoder, and terminal layers.

Only ``TerminalUnavailable`` is fatal. The others are raised at a low level
and absorbed by the public API of the module that raised them.
"""

from __future__ import annotations


class BehindviewError(Exception):
    """Base class for all behindview errors."""


class SubprocessTimeout(BehindviewError):
    """A bounded git call did not finish within its timeout."""

    def __init__(self, command: list[str], timeout: float) -> None:
        super().__init__(f"{' '.join(command)} timed out after {timeout:g}s")
        self.command = command
        self.timeout = timeout


class SubprocessFailure(BehindviewError):
    """A git call exited non-zero or could not be started."""

    def __init__(self, command: list[str], returncode: int | None, detail: str = "") -> None:
        message = f"{' '.join(command)} failed"
        if returncode is not None:
            message += f" with exit status {returncode}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode


class EmptyResult(BehindviewError):
    """A query succeeded but produced no usable rows."""


class MalformedEscapeSequence(BehindviewError):
    """An escape sequence could not be decoded."""


class TerminalUnavailable(BehindviewError):
    """stdin/stdout is not an interactive terminal or raw mode cannot be set."""
