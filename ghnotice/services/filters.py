"""Which events (and which push commits) deserve a notice."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from ghnotice.events import Commit, EventKind

ALLOWED_ACTIONS: dict[EventKind, frozenset[str]] = {
    EventKind.PULL_REQUEST: frozenset({"opened", "closed", "reopened"}),
    EventKind.ISSUES: frozenset({"opened", "created", "closed", "reopened"}),
    EventKind.ISSUE_COMMENT: frozenset({"created"}),
}


def action_allowed(kind: EventKind, action: str | None) -> bool:
    """
    Return True when `action` warrants a notice for `kind`.

    Kinds without an allow-list (push, watch, release) always pass.
    """
    allowed = ALLOWED_ACTIONS.get(kind)
    if allowed is None:
        return True
    return action in allowed


class MergeCommitFilter:
    """Drops automatically generated merge commits from a push."""

    def __init__(self, pattern: str | re.Pattern[str]):
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def is_merge(self, commit: Commit) -> bool:
        return bool(self.pattern.search(commit.message or ""))

    def __call__(self, commits: Iterable[Commit]) -> Iterator[Commit]:
        return (c for c in commits if not self.is_merge(c))
