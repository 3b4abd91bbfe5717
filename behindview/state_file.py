"""Persisted behind-count shared between the poller and other readers.

The file holds one ASCII integer. Writes go through a temp file and
``os.replace`` so readers see either the old or the new value.
"""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class BehindCountStore:
    def __init__(self, path: Path) -> None:
        self.path = path

    def ensure_parent(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def read(self) -> int | None:
        """Return the stored count, or ``None`` when missing or malformed."""
        try:
            text = self.path.read_text(encoding="ascii")
        except (OSError, UnicodeDecodeError):
            return None
        try:
            value = int(text.strip())
        except ValueError:
            logger.warning("ignoring malformed state file %s", self.path)
            return None
        return value if value >= 0 else None

    def write(self, count: int) -> None:
        """Atomically replace the stored count."""
        self.ensure_parent()
        tmp = self.path.with_name(f"{self.path.name}.{os.getpid()}.tmp")
        try:
            tmp.write_text(f"{max(0, int(count))}\n", encoding="ascii")
            os.replace(tmp, self.path)
        except OSError:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise
