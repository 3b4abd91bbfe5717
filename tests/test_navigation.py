"""Selection/scroll state machine tests.

Checks wraparound stepping, clamped paging, jumps, mouse row mapping, and the
invariant that the selection always stays inside the visible window.
"""

from __future__ import annotations

import random
import unittest

from behindview.input import Event, EventKind
from behindview.models import ViewportState
from behindview.navigation import NavigationController
from behindview.render import LIST_START_ROW


def _controller(total: int, max_rows: int = 14, selected: int = 0, scroll_offset: int = 0) -> NavigationController:
    return NavigationController(ViewportState(selected, scroll_offset), total=total, max_rows=max_rows)


class NavigationInvariantTests(unittest.TestCase):
    def assertWindowInvariants(self, controller: NavigationController) -> None:
        state = controller.state
        if controller.total == 0:
            self.assertEqual((state.selected, state.scroll_offset), (0, 0))
            return
        self.assertLessEqual(0, state.scroll_offset)
        self.assertLessEqual(state.scroll_offset, state.selected)
        self.assertLessEqual(state.selected, state.scroll_offset + controller.max_rows - 1)
        self.assertLessEqual(state.scroll_offset, max(0, controller.total - controller.max_rows))

    def test_step_circular_stays_in_range(self) -> None:
        for total in range(1, 20):
            for delta in range(-30, 31):
                controller = _controller(total, max_rows=5)
                controller.step_circular(delta)
                with self.subTest(total=total, delta=delta):
                    self.assertTrue(0 <= controller.state.selected < total)
                    self.assertWindowInvariants(controller)

    def test_empty_list_operations_are_no_ops(self) -> None:
        controller = _controller(0)
        controller.step_circular(-1)
        controller.page_clamp(1)
        controller.jump_end()
        controller.jump_home()
        self.assertFalse(controller.click_row(LIST_START_ROW, LIST_START_ROW))
        self.assertEqual((controller.state.selected, controller.state.scroll_offset), (0, 0))

    def test_step_up_from_top_wraps_to_last_row(self) -> None:
        controller = _controller(50)
        controller.step_circular(-1)
        self.assertEqual(controller.state.selected, 49)
        self.assertEqual(controller.state.scroll_offset, 36)

    def test_step_down_from_last_row_wraps_to_top(self) -> None:
        controller = _controller(50)
        controller.jump_end()
        controller.step_circular(1)
        self.assertEqual((controller.state.selected, controller.state.scroll_offset), (0, 0))

    def test_page_clamp_does_not_wrap(self) -> None:
        controller = _controller(50)
        controller.page_clamp(-1)
        self.assertEqual(controller.state.selected, 0)

        controller.page_clamp(1)
        self.assertEqual((controller.state.selected, controller.state.scroll_offset), (14, 1))

        controller.page_clamp(10)
        self.assertEqual((controller.state.selected, controller.state.scroll_offset), (49, 36))

    def test_scenario_three_commits_fit_without_scrolling(self) -> None:
        controller = _controller(3)
        controller.jump_end()
        self.assertEqual((controller.state.selected, controller.state.scroll_offset), (2, 0))

    def test_scenario_selecting_index_forty_scrolls_to_twenty_seven(self) -> None:
        controller = _controller(50)
        controller.state.selected = 40
        controller.reconcile()
        self.assertEqual(controller.state.scroll_offset, 27)

    def test_construction_reconciles_out_of_range_state(self) -> None:
        controller = _controller(5, max_rows=3, selected=9, scroll_offset=9)
        self.assertEqual((controller.state.selected, controller.state.scroll_offset), (4, 2))

    def test_click_row_maps_screen_row_to_index(self) -> None:
        controller = _controller(50, selected=20)
        self.assertEqual(controller.state.scroll_offset, 7)

        self.assertTrue(controller.click_row(LIST_START_ROW + 2, LIST_START_ROW))
        self.assertEqual(controller.state.selected, 9)
        self.assertEqual(controller.state.scroll_offset, 7)

    def test_click_outside_list_or_past_last_item_is_ignored(self) -> None:
        controller = _controller(3)
        self.assertFalse(controller.click_row(LIST_START_ROW - 1, LIST_START_ROW))
        self.assertFalse(controller.click_row(LIST_START_ROW + 3, LIST_START_ROW))
        self.assertFalse(controller.click_row(LIST_START_ROW + 14, LIST_START_ROW))
        self.assertEqual(controller.state.selected, 0)

    def test_apply_reports_whether_view_changed(self) -> None:
        controller = _controller(3)
        self.assertTrue(controller.apply(Event(EventKind.STEP_DOWN), LIST_START_ROW))
        self.assertTrue(controller.apply(Event(EventKind.SCROLL_UP), LIST_START_ROW))
        self.assertFalse(controller.apply(Event(EventKind.JUMP_HOME), LIST_START_ROW))
        self.assertTrue(controller.apply(Event(EventKind.JUMP_END), LIST_START_ROW))
        self.assertTrue(
            controller.apply(Event(EventKind.MOUSE_PRESS, button=0, column=4, row=LIST_START_ROW), LIST_START_ROW)
        )
        self.assertEqual(controller.state.selected, 0)
        self.assertFalse(controller.apply(Event(EventKind.UNKNOWN), LIST_START_ROW))

    def test_random_operation_sequences_keep_invariants(self) -> None:
        rng = random.Random(1234)
        for _ in range(200):
            total = rng.randint(0, 60)
            max_rows = rng.randint(1, 20)
            controller = _controller(total, max_rows=max_rows)
            for _ in range(40):
                op = rng.randrange(5)
                if op == 0:
                    controller.step_circular(rng.randint(-3, 3))
                elif op == 1:
                    controller.page_clamp(rng.choice((-1, 1)))
                elif op == 2:
                    controller.jump_home()
                elif op == 3:
                    controller.jump_end()
                else:
                    controller.click_row(rng.randint(1, 30), LIST_START_ROW)
                self.assertWindowInvariants(controller)


if __name__ == "__main__":
    unittest.main()
