from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from behindview import config


class ConfigBehaviorTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.config_path = self.root / "config.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_or_malformed_config_loads_empty(self) -> None:
        self.assertEqual(config.load_config(self.config_path), {})
        self.config_path.write_text("{not json", encoding="utf-8")
        self.assertEqual(config.load_config(self.config_path), {})
        self.config_path.write_text("[1, 2]", encoding="utf-8")
        self.assertEqual(config.load_config(self.config_path), {})

    def test_defaults_use_cwd_and_documented_values(self) -> None:
        settings = config.load_settings(self.config_path, cwd=self.root)

        self.assertEqual(settings.repo_path, self.root)
        self.assertIsNone(settings.git_dir)
        self.assertEqual(settings.remote, "origin")
        self.assertEqual(settings.title, "Updates")
        self.assertEqual(settings.notify_threshold, 30)
        self.assertEqual(settings.timeout_seconds, 10.0)
        self.assertEqual(settings.max_rows, 14)
        self.assertEqual(settings.state_file, config.DEFAULT_STATE_PATH)
        self.assertEqual(settings.repo_label, str(self.root))

    def test_valid_entries_are_applied(self) -> None:
        self.config_path.write_text(
            json.dumps(
                {
                    "git_dir": str(self.root / "dots"),
                    "work_tree": str(self.root),
                    "title": "Dotfiles",
                    "notify_threshold": 12,
                    "timeout_seconds": 4,
                    "max_rows": 8,
                    "state_file": str(self.root / "count"),
                }
            ),
            encoding="utf-8",
        )
        settings = config.load_settings(self.config_path, cwd=self.root)

        self.assertEqual(settings.git_dir, self.root / "dots")
        self.assertEqual(settings.work_tree, self.root)
        self.assertEqual(settings.title, "Dotfiles")
        self.assertEqual(settings.notify_threshold, 12)
        self.assertEqual(settings.timeout_seconds, 4.0)
        self.assertEqual(settings.max_rows, 8)
        self.assertEqual(settings.state_file, self.root / "count")
        self.assertEqual(settings.repo_label, str(self.root / "dots"))

    def test_invalid_entries_fall_back_to_defaults(self) -> None:
        data = {"notify_threshold": True, "max_rows": -3, "timeout_seconds": "fast", "remote": "  ", "title": 7}
        settings = config.settings_from_config(data, cwd=self.root)

        self.assertEqual(settings.notify_threshold, 30)
        self.assertEqual(settings.max_rows, 14)
        self.assertEqual(settings.timeout_seconds, 10.0)
        self.assertEqual(settings.remote, "origin")
        self.assertEqual(settings.title, "Updates")

    def test_overrides_skip_none_values(self) -> None:
        base = config.Settings(repo_path=self.root)
        updated = base.with_overrides(title="Dotfiles", remote=None, max_rows=5)

        self.assertEqual(updated.title, "Dotfiles")
        self.assertEqual(updated.remote, "origin")
        self.assertEqual(updated.max_rows, 5)
        self.assertIs(base.with_overrides(remote=None), base)


if __name__ == "__main__":
    unittest.main()
