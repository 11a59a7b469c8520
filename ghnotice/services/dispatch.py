"""Per-delivery orchestration: gate, filter, format, forward."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence

from ghnotice.errors import UnknownRepository
from ghnotice.events import (
    Event,
    EventKind,
    IssueCommentEvent,
    IssuesEvent,
    PullRequestEvent,
    PushEvent,
    ReleaseEvent,
    WatchEvent,
)
from ghnotice.registry import FeedTarget, Registry
from ghnotice.services import formatter
from ghnotice.services.filters import MergeCommitFilter, action_allowed

logger = logging.getLogger(__name__)

POLICY_REJECT = "reject"
POLICY_IGNORE = "ignore"


class Forwarder(Protocol):
    async def send_notices(
        self,
        targets: Sequence[FeedTarget],
        repo_full_name: str,
        notices: Sequence[str],
        event: str | None = None,
    ) -> int: ...


@dataclass
class DispatchResult:
    kind: EventKind
    repo: str = ""
    notices: list[str] = field(default_factory=list)
    outcome: str = "filtered"

    def describe(self) -> str:
        if self.outcome == "pong":
            return "pong"
        if self.outcome == "forwarded":
            return f"{self.kind.value} event: {len(self.notices)} notice(s) for {self.repo}"
        return f"{self.kind.value} event {self.outcome}"


Handler = Callable[["Dispatcher", Event], list[str]]


def _on_push(d: "Dispatcher", event: PushEvent) -> list[str]:
    d.registry.authorize(event.repository.html_url)
    return [formatter.format_commit(event.repository, c) for c in d.merge_filter(event.commits)]


def _on_pull_request(d: "Dispatcher", event: PullRequestEvent) -> list[str]:
    if not action_allowed(event.kind, event.action):
        return []
    d.registry.authorize(event.repository.html_url)
    return [formatter.format_pull_request(event)]


def _on_issues(d: "Dispatcher", event: IssuesEvent) -> list[str]:
    if not action_allowed(event.kind, event.action):
        return []
    d.registry.authorize(event.repository.html_url)
    return [formatter.format_issue(event)]


def _on_issue_comment(d: "Dispatcher", event: IssueCommentEvent) -> list[str]:
    if not action_allowed(event.kind, event.action):
        return []
    d.registry.authorize(event.repository.html_url)
    return [formatter.format_issue_comment(event)]


def _on_watch(d: "Dispatcher", event: WatchEvent) -> list[str]:
    d.registry.authorize(event.repository.html_url)
    return [formatter.format_star(event)]


def _on_release(d: "Dispatcher", event: ReleaseEvent) -> list[str]:
    d.registry.authorize(event.repository.html_url)
    return [formatter.format_release(event)]


HANDLERS: dict[EventKind, Handler] = {
    EventKind.PUSH: _on_push,
    EventKind.PULL_REQUEST: _on_pull_request,
    EventKind.ISSUES: _on_issues,
    EventKind.ISSUE_COMMENT: _on_issue_comment,
    EventKind.WATCH: _on_watch,
    EventKind.RELEASE: _on_release,
}


class Dispatcher:
    """
    Routes a decoded event to its handler and forwards the resulting notices.

    `registry` is shared, read-only state; a dispatcher holds no per-request
    data and can serve concurrent deliveries.
    """

    def __init__(
        self,
        registry: Registry,
        forwarder: Forwarder,
        *,
        merge_pattern: str,
        unknown_repo_policy: str = POLICY_REJECT,
    ):
        if unknown_repo_policy not in (POLICY_REJECT, POLICY_IGNORE):
            raise ValueError(f"unknown repository policy: {unknown_repo_policy!r}")
        self.registry = registry
        self.forwarder = forwarder
        self.merge_filter = MergeCommitFilter(merge_pattern)
        self.unknown_repo_policy = unknown_repo_policy

    def notices_for(self, event: Event) -> list[str]:
        """Build the notices for `event` without forwarding them."""
        if event.kind is EventKind.PING:
            return []
        return HANDLERS[event.kind](self, event)

    async def dispatch(self, event: Event) -> DispatchResult:
        kind = event.kind
        if kind is EventKind.PING:
            logger.info("Got ping event from GitHub (hook %s)", event.hook_id)
            return DispatchResult(kind=kind, outcome="pong")

        repo = event.repository.full_name
        logger.info("Got %s event from GitHub for %s", kind.value, repo)
        try:
            notices = self.notices_for(event)
        except UnknownRepository as exc:
            if self.unknown_repo_policy == POLICY_IGNORE:
                logger.warning("Ignoring %s event: %s", kind.value, exc)
                return DispatchResult(kind=kind, repo=repo, outcome="ignored")
            raise

        if not notices:
            logger.debug("No notices for %s event on %s", kind.value, repo)
            return DispatchResult(kind=kind, repo=repo, outcome="filtered")

        await self.forwarder.send_notices(
            self.registry.feeds, repo, notices, kind.value
        )
        return DispatchResult(kind=kind, repo=repo, notices=notices, outcome="forwarded")
