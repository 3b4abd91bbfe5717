"""Selection and scroll state machine for the commit list.

This module intentionally has no terminal concerns. Every mutation ends with
``reconcile`` so the selected row is always inside the visible window.
"""

from __future__ import annotations

from .input import Event, EventKind
from .models import ViewportState


class NavigationController:
    """Moves ``ViewportState`` over a list of ``total`` rows shown ``max_rows`` at a time."""

    def __init__(self, state: ViewportState, total: int, max_rows: int) -> None:
        self.state = state
        self.total = max(0, total)
        self.max_rows = max(1, max_rows)
        self.reconcile()

    @property
    def max_scroll_offset(self) -> int:
        return max(0, self.total - self.max_rows)

    def reconcile(self) -> None:
        """Clamp selection into range and scroll just enough to keep it visible."""
        state = self.state
        if self.total == 0:
            state.selected = 0
            state.scroll_offset = 0
            return
        state.selected = max(0, min(state.selected, self.total - 1))
        if state.selected < state.scroll_offset:
            state.scroll_offset = state.selected
        elif state.selected >= state.scroll_offset + self.max_rows:
            state.scroll_offset = state.selected - self.max_rows + 1
        state.scroll_offset = max(0, min(state.scroll_offset, self.max_scroll_offset))

    def step_circular(self, delta: int) -> None:
        """Move by ``delta`` rows, wrapping past either end."""
        if self.total == 0:
            return
        self.state.selected = (self.state.selected + delta + self.total) % self.total
        self.reconcile()

    def page_clamp(self, delta: int) -> None:
        """Move by ``delta`` pages, stopping at the first/last row."""
        if self.total == 0:
            return
        target = self.state.selected + delta * self.max_rows
        self.state.selected = max(0, min(target, self.total - 1))
        self.reconcile()

    def jump_home(self) -> None:
        if self.total == 0:
            return
        self.state.selected = 0
        self.reconcile()

    def jump_end(self) -> None:
        if self.total == 0:
            return
        self.state.selected = self.total - 1
        self.reconcile()

    def click_row(self, row: int, list_start_row: int) -> bool:
        """Select the row under absolute screen row ``row``; return whether it hit an item."""
        offset = row - list_start_row
        if not 0 <= offset < self.max_rows:
            return False
        idx = offset + self.state.scroll_offset
        if not 0 <= idx < self.total:
            return False
        self.state.selected = idx
        self.reconcile()
        return True

    def apply(self, event: Event, list_start_row: int) -> bool:
        """Apply one decoded event; return whether the viewport changed."""
        before = (self.state.selected, self.state.scroll_offset)
        kind = event.kind
        if kind in {EventKind.STEP_UP, EventKind.SCROLL_UP}:
            self.step_circular(-1)
        elif kind in {EventKind.STEP_DOWN, EventKind.SCROLL_DOWN}:
            self.step_circular(1)
        elif kind == EventKind.PAGE_UP:
            self.page_clamp(-1)
        elif kind == EventKind.PAGE_DOWN:
            self.page_clamp(1)
        elif kind == EventKind.JUMP_HOME:
            self.jump_home()
        elif kind == EventKind.JUMP_END:
            self.jump_end()
        elif kind == EventKind.MOUSE_PRESS:
            self.click_row(event.row, list_start_row)
        return (self.state.selected, self.state.scroll_offset) != before
