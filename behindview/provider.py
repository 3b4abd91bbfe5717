"""Repository status providers.

``GitStatusProvider`` runs bounded ``git`` queries; ``InMemoryStatusProvider``
serves fixed data so the dashboard can be driven without subprocesses.
Neither lets a query failure escape to the UI layer.
"""

from __future__ import annotations

import contextlib
import logging
import os
import signal
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from .ansi import sanitize_terminal_text, truncate_text
from .config import DEFAULT_REMOTE, DEFAULT_TIMEOUT_SECONDS, DEFAULT_TITLE
from .errors import EmptyResult, SubprocessFailure, SubprocessTimeout
from .models import Commit, FetchResult, RepoStatus, error_commit, up_to_date_commit

logger = logging.getLogger(__name__)

BOX_INNER_WIDTH = 76
ITEM_PADDING = 14
SUBJECT_MARGIN = 6
LOG_FIELD_SEPARATOR = "|"


def max_subject_length(
    box_width: int = BOX_INNER_WIDTH,
    item_padding: int = ITEM_PADDING,
    margin: int = SUBJECT_MARGIN,
) -> int:
    """Widest subject that fits beside the hash column inside the box."""
    return max(1, box_width - item_padding - margin)


def parse_log_output(output: str, max_len: int) -> list[Commit]:
    """Parse ``%h|%s`` log lines into commits, truncating long subjects."""
    commits: list[Commit] = []
    for line in output.splitlines():
        commit_hash, _sep, subject = line.partition(LOG_FIELD_SEPARATOR)
        commit_hash = commit_hash.strip()
        if not commit_hash:
            continue
        subject = sanitize_terminal_text(subject.rstrip("\r"))
        commits.append(Commit(hash=commit_hash, subject=truncate_text(subject, max_len)))
    return commits


def _parse_count(output: str) -> int:
    return max(0, int(output.strip()))


def _terminal_fd() -> int | None:
    try:
        fd = sys.stdin.fileno()
    except (AttributeError, OSError, ValueError):
        return None
    return fd if os.isatty(fd) else None


@contextlib.contextmanager
def _terminal_foreground(pgid: int):
    """Make ``pgid`` the terminal's foreground group so its prompts can read input."""
    fd = _terminal_fd()
    previous = None
    if fd is not None:
        with contextlib.suppress(OSError):
            previous = os.tcgetpgrp(fd)
    if previous is None:
        yield
        return

    # Changing the foreground group from a background group raises SIGTTOU.
    old_handler = signal.signal(signal.SIGTTOU, signal.SIG_IGN)
    try:
        with contextlib.suppress(OSError):
            os.tcsetpgrp(fd, pgid)
        # Resume the group if it already stopped on a terminal read.
        with contextlib.suppress(ProcessLookupError):
            os.killpg(pgid, signal.SIGCONT)
        yield
    finally:
        with contextlib.suppress(OSError):
            os.tcsetpgrp(fd, previous)
        signal.signal(signal.SIGTTOU, old_handler)


def _kill_process_group(proc: subprocess.Popen) -> None:
    with contextlib.suppress(ProcessLookupError):
        os.killpg(proc.pid, signal.SIGKILL)
    proc.communicate()


def run_in_process_group(
    command: list[str],
    *,
    stdin=None,
    stdout=None,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
    foreground: bool = False,
) -> subprocess.CompletedProcess:
    """Run ``command`` in its own process group, returning like ``subprocess.run``.

    On timeout or interruption the whole group is killed, so helpers such as
    an ``ssh`` transport blocked on a passphrase prompt do not outlive the
    command. With ``foreground`` the group owns the terminal while it runs.
    Raises ``subprocess.TimeoutExpired`` and ``OSError`` unchanged.
    """
    proc = subprocess.Popen(
        command,
        stdin=stdin,
        stdout=stdout,
        stderr=subprocess.DEVNULL,
        text=True,
        encoding="utf-8",
        errors="replace",
        env=env,
        preexec_fn=os.setpgrp,
    )
    handoff = _terminal_foreground(proc.pid) if foreground else contextlib.nullcontext()
    with handoff:
        try:
            output, _ = proc.communicate(timeout=timeout)
        except BaseException:
            _kill_process_group(proc)
            raise
    return subprocess.CompletedProcess(command, proc.returncode, stdout=output)


class StatusProvider(Protocol):
    def fetch(self, timeout: float | None = None) -> FetchResult: ...

    def count_behind(self) -> int: ...

    def load_status(self) -> RepoStatus: ...

    def list_commits(self) -> list[Commit]: ...


class GitStatusProvider:
    """Status queries against a git repository, each bounded by a timeout.

    ``git_dir``/``work_tree`` address a bare repository whose work tree lives
    elsewhere; otherwise commands run with ``-C repo_path``.
    """

    def __init__(
        self,
        repo_path: Path,
        *,
        git_dir: Path | None = None,
        work_tree: Path | None = None,
        remote: str = DEFAULT_REMOTE,
        title: str = DEFAULT_TITLE,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        interactive: bool = True,
        max_subject_len: int | None = None,
    ) -> None:
        self.repo_path = repo_path
        self.git_dir = git_dir
        self.work_tree = work_tree
        self.remote = remote
        self.title = title
        self.timeout_seconds = timeout_seconds
        self.interactive = interactive
        self.max_subject_len = max_subject_len if max_subject_len is not None else max_subject_length()
        self._behind: int | None = None
        self._behind_known = False

    def _git_command(self, args: Sequence[str]) -> list[str]:
        command = ["git"]
        if self.git_dir is not None:
            command += ["--git-dir", str(self.git_dir)]
            if self.work_tree is not None:
                command += ["--work-tree", str(self.work_tree)]
        else:
            command += ["-C", str(self.repo_path)]
        command.extend(args)
        return command

    def _run_git(self, args: Sequence[str], timeout: float | None = None, capture: bool = True) -> str:
        """Run one git command; raise ``SubprocessTimeout``/``SubprocessFailure``."""
        command = self._git_command(args)
        limit = self.timeout_seconds if timeout is None else timeout
        env = None
        stdin = None
        if not self.interactive:
            env = dict(os.environ, GIT_TERMINAL_PROMPT="0")
            stdin = subprocess.DEVNULL
        try:
            proc = run_in_process_group(
                command,
                stdin=stdin,
                stdout=subprocess.PIPE if capture else subprocess.DEVNULL,
                env=env,
                timeout=limit,
                foreground=self.interactive,
            )
        except subprocess.TimeoutExpired as exc:
            raise SubprocessTimeout(command, limit) from exc
        except OSError as exc:
            raise SubprocessFailure(command, None, str(exc)) from exc
        if proc.returncode != 0:
            raise SubprocessFailure(command, proc.returncode)
        return proc.stdout if capture else ""

    def _count(self, revision_range: str) -> int:
        try:
            return _parse_count(self._run_git(["rev-list", "--count", revision_range]))
        except (SubprocessTimeout, SubprocessFailure) as exc:
            logger.warning("revision count for %s unavailable: %s", revision_range, exc)
        except ValueError:
            logger.warning("revision count for %s was not an integer", revision_range)
        return 0

    def _query_behind(self) -> int | None:
        try:
            return _parse_count(self._run_git(["rev-list", "--count", "HEAD..@{u}"]))
        except (SubprocessTimeout, SubprocessFailure) as exc:
            logger.warning("behind count unavailable: %s", exc)
        except ValueError:
            logger.warning("behind count was not an integer")
        return None

    def _count_behind_checked(self) -> int | None:
        """Behind count, or ``None`` when the query failed; kept until the next fetch."""
        if not self._behind_known:
            self._behind = self._query_behind()
            self._behind_known = True
        return self._behind

    def fetch(self, timeout: float | None = None) -> FetchResult:
        self._behind_known = False
        try:
            self._run_git(["fetch", "-q", self.remote], timeout=timeout, capture=False)
        except (SubprocessTimeout, SubprocessFailure) as exc:
            logger.warning("fetch from %s failed: %s", self.remote, exc)
            return FetchResult(ok=False, error=exc)
        logger.info("fetched %s", self.remote)
        return FetchResult(ok=True)

    def count_behind(self) -> int:
        count = self._count_behind_checked()
        return 0 if count is None else count

    def load_status(self) -> RepoStatus:
        return RepoStatus(
            local_rev_count=self._count("HEAD"),
            remote_rev_count=self._count("@{u}"),
            behind_count=self.count_behind(),
        )

    def _log_commits(self) -> list[Commit]:
        output = self._run_git(["log", "HEAD..@{u}", f"--pretty=format:%h{LOG_FIELD_SEPARATOR}%s"])
        commits = parse_log_output(output, self.max_subject_len)
        if not commits:
            raise EmptyResult("commit log returned no rows")
        return commits

    def list_commits(self) -> list[Commit]:
        count = self._count_behind_checked()
        if count == 0:
            return [up_to_date_commit(self.title)]
        try:
            return self._log_commits()
        except (SubprocessTimeout, SubprocessFailure, EmptyResult) as exc:
            logger.warning("commit list unavailable: %s", exc)
            return [error_commit()]


class InMemoryStatusProvider:
    """Provider over fixed data, mirroring ``GitStatusProvider`` fallbacks.

    ``behind_count`` defaults to the number of commits; ``count_fails``
    makes the count query report 0 while the list is still attempted.
    """

    def __init__(
        self,
        commits: Sequence[Commit] = (),
        *,
        behind_count: int | None = None,
        count_fails: bool = False,
        local_rev_count: int = 0,
        remote_rev_count: int = 0,
        fetch_ok: bool = True,
        title: str = DEFAULT_TITLE,
        max_subject_len: int | None = None,
    ) -> None:
        limit = max_subject_len if max_subject_len is not None else max_subject_length()
        self.commits = [Commit(c.hash, truncate_text(c.subject, limit)) for c in commits]
        self.behind: int | None = len(self.commits) if behind_count is None else behind_count
        if count_fails:
            self.behind = None
        self.local_rev_count = local_rev_count
        self.remote_rev_count = remote_rev_count
        self.fetch_ok = fetch_ok
        self.title = title
        self.fetch_calls: list[float | None] = []

    def fetch(self, timeout: float | None = None) -> FetchResult:
        self.fetch_calls.append(timeout)
        if self.fetch_ok:
            return FetchResult(ok=True)
        return FetchResult(ok=False, error=SubprocessTimeout(["git", "fetch"], timeout or 0.0))

    def count_behind(self) -> int:
        return self.behind or 0

    def load_status(self) -> RepoStatus:
        return RepoStatus(
            local_rev_count=self.local_rev_count,
            remote_rev_count=self.remote_rev_count,
            behind_count=self.count_behind(),
        )

    def list_commits(self) -> list[Commit]:
        if self.behind == 0:
            return [up_to_date_commit(self.title)]
        if not self.commits:
            return [error_commit()]
        return list(self.commits)
