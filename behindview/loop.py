"""Main interactive event loop for the dashboard.

Strictly sequential: draw, block for one decoded event, dispatch, repeat.
Feature logic lives in the decoder, navigation controller, and renderer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from .input import Event, EventKind
from .navigation import NavigationController
from .render import LIST_START_ROW

logger = logging.getLogger(__name__)

EXIT_EVENTS = {EventKind.QUIT, EventKind.EOF}


class EventSource(Protocol):
    def next(self) -> Event: ...


def run_main_loop(
    terminal,
    decoder: EventSource,
    controller: NavigationController,
    draw: Callable[[], None],
    list_start_row: int = LIST_START_ROW,
) -> None:
    """Run the dashboard until a quit event or end of input.

    ``terminal`` supplies the ``raw_mode()`` context manager; ``draw`` renders
    the current state. Frames are only redrawn after a change.
    """
    with terminal.raw_mode():
        dirty = True
        while True:
            if dirty:
                draw()
                dirty = False
            event = decoder.next()
            if event.kind in EXIT_EVENTS:
                logger.debug("leaving event loop on %s", event.kind.value)
                break
            if event.kind == EventKind.UNKNOWN:
                continue
            dirty = controller.apply(event, list_start_row)
