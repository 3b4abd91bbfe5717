"""Fire-and-forget desktop notifications via ``notify-send``."""

from __future__ import annotations

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)

NOTIFY_COMMAND = "notify-send"
NOTIFY_TIMEOUT_SECONDS = 5.0


class DesktopNotifier:
    """Send desktop notifications when the notification tool is installed."""

    def __init__(self, command: str = NOTIFY_COMMAND) -> None:
        self.command = command

    def available(self) -> bool:
        return shutil.which(self.command) is not None

    def notify(self, title: str, body: str, urgency: str = "critical", expire_ms: int = 10000) -> bool:
        """Request a notification; return whether the request was handed off."""
        if not self.available():
            logger.info("%s not found; skipping notification", self.command)
            return False
        try:
            subprocess.run(
                [self.command, "-u", urgency, "-t", str(expire_ms), title, body],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
                timeout=NOTIFY_TIMEOUT_SECONDS,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning("notification failed: %s", exc)
            return False
        return True
