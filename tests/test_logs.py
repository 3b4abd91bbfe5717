from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from behindview.logs import setup_logging


class LoggingSetupTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.logger = logging.getLogger("behindview")
        self.addCleanup(self._reset)

    def _reset(self) -> None:
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
        self.logger.propagate = True
        self._tmp.cleanup()

    def test_records_go_to_log_file_only(self) -> None:
        log_file = Path(self._tmp.name) / "logs" / "behindview.log"
        setup_logging(log_file)
        logging.getLogger("behindview.poller").info("persisted %d", 4)
        for handler in self.logger.handlers:
            handler.flush()

        self.assertFalse(self.logger.propagate)
        self.assertEqual(len(self.logger.handlers), 1)
        self.assertIn("INFO - behindview.poller - persisted 4", log_file.read_text(encoding="utf-8"))

    def test_verbose_adds_stderr_handler_and_debug_level(self) -> None:
        setup_logging(Path(self._tmp.name) / "x.log", verbose=True)
        self.assertEqual(self.logger.level, logging.DEBUG)
        self.assertEqual(len(self.logger.handlers), 2)

    def test_repeated_setup_does_not_stack_handlers(self) -> None:
        log_file = Path(self._tmp.name) / "x.log"
        setup_logging(log_file)
        setup_logging(log_file)
        self.assertEqual(len(self.logger.handlers), 1)

    def test_unwritable_log_location_falls_back_to_null_handler(self) -> None:
        blocker = Path(self._tmp.name) / "file"
        blocker.write_text("", encoding="utf-8")
        setup_logging(blocker / "sub" / "x.log")
        self.assertIsInstance(self.logger.handlers[0], logging.NullHandler)


if __name__ == "__main__":
    unittest.main()
