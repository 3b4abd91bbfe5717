"""Non-interactive background check.

Fetches, records how far the branch is behind its upstream, and asks for a
desktop notification once the count reaches the configured threshold.
Failures are absorbed; the poll always completes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from .config import DEFAULT_NOTIFY_THRESHOLD, DEFAULT_TITLE
from .provider import StatusProvider
from .state_file import BehindCountStore

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, title: str, body: str, urgency: str = "critical", expire_ms: int = 10000) -> bool: ...


@dataclass(frozen=True)
class PollResult:
    behind_count: int
    fetched: bool
    notified: bool = False


def notification_body(count: int) -> str:
    return f"Update Critical: Your system is {count} commits behind."


def run_background_check(
    provider: StatusProvider,
    store: BehindCountStore,
    notifier: Notifier,
    *,
    threshold: int = DEFAULT_NOTIFY_THRESHOLD,
    title: str = DEFAULT_TITLE,
    timeout: float | None = None,
) -> PollResult:
    """Run one best-effort poll and persist the behind-count.

    When the fetch fails the previous value is kept (initialised to 0 if the
    state file did not exist) and no notification is sent.
    """
    try:
        store.ensure_parent()
    except OSError as exc:
        logger.warning("cannot create state directory for %s: %s", store.path, exc)

    fetch = provider.fetch(timeout)
    if not fetch.ok:
        previous = store.read()
        if previous is None:
            previous = 0
            _persist(store, previous)
        logger.info("fetch failed; keeping behind count %d", previous)
        return PollResult(behind_count=previous, fetched=False)

    count = provider.count_behind()
    _persist(store, count)
    logger.info("behind count is %d", count)

    notified = False
    if count >= threshold:
        notified = notifier.notify(title, notification_body(count), urgency="critical", expire_ms=10000)
    return PollResult(behind_count=count, fetched=True, notified=notified)


def _persist(store: BehindCountStore, count: int) -> None:
    try:
        store.write(count)
    except OSError as exc:
        logger.warning("cannot write state file %s: %s", store.path, exc)
