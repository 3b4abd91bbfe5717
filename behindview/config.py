"""Persistent JSON config helpers.

Stores the repository location, notification threshold, and viewport size.
Malformed or missing config entries fall back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir, user_state_dir

APP_NAME = "behindview"
CONFIG_FILENAME = "config.json"
STATE_FILENAME = "behind_commits"
LOG_FILENAME = "behindview.log"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_STATE_PATH = Path(user_state_dir(APP_NAME, appauthor=False)) / STATE_FILENAME
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME

DEFAULT_REMOTE = "origin"
DEFAULT_TITLE = "Updates"
DEFAULT_NOTIFY_THRESHOLD = 30
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_ROWS = 14


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings for both dashboard and background modes."""

    repo_path: Path
    git_dir: Path | None = None
    work_tree: Path | None = None
    remote: str = DEFAULT_REMOTE
    title: str = DEFAULT_TITLE
    notify_threshold: int = DEFAULT_NOTIFY_THRESHOLD
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_rows: int = DEFAULT_MAX_ROWS
    state_file: Path = DEFAULT_STATE_PATH
    log_file: Path = DEFAULT_LOG_PATH

    @property
    def repo_label(self) -> str:
        """Path shown in the dashboard footer."""
        return str(self.git_dir if self.git_dir is not None else self.repo_path)

    def with_overrides(self, **overrides: object) -> Settings:
        """Return a copy with every non-``None`` override applied."""
        present = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **present) if present else self


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_positive_int(value: object, default: int) -> int:
    """Accept plain positive integers; booleans and other types fall back."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _coerce_positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return default
    return float(value)


def _coerce_text(value: object, default: str) -> str:
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _coerce_path(value: object) -> Path | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return Path(value.strip()).expanduser()


def settings_from_config(data: dict[str, object], cwd: Path | None = None) -> Settings:
    """Build ``Settings`` from a config mapping, ignoring invalid entries."""
    repo_path = _coerce_path(data.get("repo_path")) or (cwd if cwd is not None else Path.cwd())
    return Settings(
        repo_path=repo_path,
        git_dir=_coerce_path(data.get("git_dir")),
        work_tree=_coerce_path(data.get("work_tree")),
        remote=_coerce_text(data.get("remote"), DEFAULT_REMOTE),
        title=_coerce_text(data.get("title"), DEFAULT_TITLE),
        notify_threshold=_coerce_positive_int(data.get("notify_threshold"), DEFAULT_NOTIFY_THRESHOLD),
        timeout_seconds=_coerce_positive_float(data.get("timeout_seconds"), DEFAULT_TIMEOUT_SECONDS),
        max_rows=_coerce_positive_int(data.get("max_rows"), DEFAULT_MAX_ROWS),
        state_file=_coerce_path(data.get("state_file")) or DEFAULT_STATE_PATH,
        log_file=_coerce_path(data.get("log_file")) or DEFAULT_LOG_PATH,
    )


def load_settings(path: Path | None = None, cwd: Path | None = None) -> Settings:
    """Load settings from the config file, falling back to defaults."""
    return settings_from_config(load_config(path), cwd=cwd)
