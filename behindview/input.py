"""Low-level terminal input decoding.

Reads raw bytes from the terminal and translates them into dashboard events.
Handles ESC-sequence timing, cursor/paging keys, and SGR mouse reports.
"""

from __future__ import annotations

import enum
import os
import select
from dataclasses import dataclass

from .ansi import ESC
from .errors import MalformedEscapeSequence

ESC_SEQUENCE_TIMEOUT_MS = 50
MAX_SEQUENCE_BYTES = 32
ESC_BYTE = ESC.encode("ascii")
INTERRUPT_BYTE = b"\x03"
MOUSE_PREFIX = "[<"
WHEEL_UP_BUTTON = 64
WHEEL_DOWN_BUTTON = 65


class EventKind(enum.Enum):
    STEP_UP = "step_up"
    STEP_DOWN = "step_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    JUMP_HOME = "jump_home"
    JUMP_END = "jump_end"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    MOUSE_PRESS = "mouse_press"
    QUIT = "quit"
    EOF = "eof"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Event:
    """One decoded input event; mouse fields are 1-based and 0 otherwise."""

    kind: EventKind
    button: int = 0
    column: int = 0
    row: int = 0


UNKNOWN = Event(EventKind.UNKNOWN)
QUIT = Event(EventKind.QUIT)
EOF = Event(EventKind.EOF)

KEY_EVENTS: dict[bytes, Event] = {
    b"k": Event(EventKind.STEP_UP),
    b"K": Event(EventKind.STEP_UP),
    b"j": Event(EventKind.STEP_DOWN),
    b"J": Event(EventKind.STEP_DOWN),
    b"g": Event(EventKind.JUMP_HOME),
    b"G": Event(EventKind.JUMP_END),
    b"q": QUIT,
    b"Q": QUIT,
    INTERRUPT_BYTE: QUIT,
}

# Sequences as they follow the ESC byte; "O" forms are application cursor mode.
SEQUENCE_EVENTS: dict[str, Event] = {
    "[A": Event(EventKind.STEP_UP),
    "OA": Event(EventKind.STEP_UP),
    "[B": Event(EventKind.STEP_DOWN),
    "OB": Event(EventKind.STEP_DOWN),
    "[5~": Event(EventKind.PAGE_UP),
    "[6~": Event(EventKind.PAGE_DOWN),
    "[H": Event(EventKind.JUMP_HOME),
    "[1~": Event(EventKind.JUMP_HOME),
    "OH": Event(EventKind.JUMP_HOME),
    "[F": Event(EventKind.JUMP_END),
    "[4~": Event(EventKind.JUMP_END),
    "OF": Event(EventKind.JUMP_END),
}


def _parse_mouse_report(sequence: str) -> tuple[int, int, int, str]:
    """Split ``[<button;column;row`` + ``M``/``m`` into its fields."""
    if not sequence.startswith(MOUSE_PREFIX) or len(sequence) < 3:
        raise MalformedEscapeSequence(sequence)
    terminator = sequence[-1]
    if terminator not in {"M", "m"}:
        raise MalformedEscapeSequence(sequence)
    fields = sequence[len(MOUSE_PREFIX):-1].split(";")
    if len(fields) != 3 or not all(field.isdigit() for field in fields):
        raise MalformedEscapeSequence(sequence)
    button, column, row = (int(field) for field in fields)
    return button, column, row, terminator


def decode_mouse(sequence: str) -> Event:
    """Decode an SGR mouse report; anything unusable becomes ``UNKNOWN``."""
    try:
        button, column, row, terminator = _parse_mouse_report(sequence)
    except MalformedEscapeSequence:
        return UNKNOWN
    if button == WHEEL_UP_BUTTON:
        return Event(EventKind.SCROLL_UP, button=button, column=column, row=row)
    if button == WHEEL_DOWN_BUTTON:
        return Event(EventKind.SCROLL_DOWN, button=button, column=column, row=row)
    if terminator != "M":
        return UNKNOWN
    return Event(EventKind.MOUSE_PRESS, button=button, column=column, row=row)


def decode_sequence(sequence: str) -> Event:
    """Map the bytes that followed an ESC to an event.

    An empty sequence is a bare ESC and quits.
    """
    if not sequence:
        return QUIT
    if sequence.startswith(MOUSE_PREFIX):
        return decode_mouse(sequence)
    return SEQUENCE_EVENTS.get(sequence, UNKNOWN)


def decode_key(ch: bytes) -> Event:
    return KEY_EVENTS.get(ch, UNKNOWN)


def _is_csi_final(ch: str) -> bool:
    return "\x40" <= ch <= "\x7e"


def _sequence_complete(sequence: str) -> bool:
    """Return whether ``sequence`` (bytes after ESC) needs no further bytes."""
    if not sequence:
        return False
    introducer = sequence[0]
    if introducer == "[":
        return len(sequence) > 1 and _is_csi_final(sequence[-1])
    if introducer == "O":
        return len(sequence) == 2
    return True


class InputDecoder:
    """Turns the raw terminal byte stream into ``Event`` values.

    The first byte of an event blocks indefinitely; continuation bytes of an
    escape sequence wait at most ``escape_timeout_ms`` each.
    """

    def __init__(self, fd: int, escape_timeout_ms: int = ESC_SEQUENCE_TIMEOUT_MS) -> None:
        self.fd = fd
        self.escape_timeout_ms = escape_timeout_ms

    def _read_ready_byte(self) -> bytes | None:
        ready, _, _ = select.select([self.fd], [], [], max(0.0, self.escape_timeout_ms / 1000.0))
        if not ready:
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            return None
        return ch

    def _read_escape_sequence(self) -> str | None:
        """Accumulate bytes after ESC; ``None`` when the sequence is overlong."""
        sequence = ""
        while not _sequence_complete(sequence):
            ch = self._read_ready_byte()
            if ch is None:
                break
            sequence += ch.decode("latin-1")
            if len(sequence) > MAX_SEQUENCE_BYTES:
                return None
        return sequence

    def next(self) -> Event:
        ch = os.read(self.fd, 1)
        if not ch:
            return EOF
        if ch != ESC_BYTE:
            return decode_key(ch)
        sequence = self._read_escape_sequence()
        if sequence is None:
            return UNKNOWN
        return decode_sequence(sequence)
