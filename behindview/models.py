"""Plain data records passed between provider, navigation, and renderer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .errors import SubprocessFailure, SubprocessTimeout

UP_TO_DATE_HASH = "HEAD"
ERROR_HASH = "ERR"

FetchError = Union[SubprocessTimeout, SubprocessFailure]


@dataclass(frozen=True)
class Commit:
    """One pending upstream commit as shown in the list."""

    hash: str
    subject: str

    @property
    def is_up_to_date(self) -> bool:
        return self.hash == UP_TO_DATE_HASH

    @property
    def is_error(self) -> bool:
        return self.hash == ERROR_HASH


def up_to_date_commit(title: str) -> Commit:
    """Return the synthetic row shown when nothing is pending."""
    return Commit(hash=UP_TO_DATE_HASH, subject=f"{title} is up to date!")


def error_commit() -> Commit:
    """Return the synthetic row shown when the commit log cannot be read."""
    return Commit(hash=ERROR_HASH, subject="Failed to retrieve commit list")


@dataclass(frozen=True)
class RepoStatus:
    """Revision counts for the local branch and its upstream."""

    local_rev_count: int = 0
    remote_rev_count: int = 0
    behind_count: int = 0


@dataclass(frozen=True)
class FetchResult:
    ok: bool
    error: FetchError | None = None


@dataclass
class ViewportState:
    """Selection and scroll position; mutated only by ``NavigationController``."""

    selected: int = 0
    scroll_offset: int = 0
