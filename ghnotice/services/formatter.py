"""Notice texts for GitHub webhook events."""

from __future__ import annotations

from ghnotice.events import (
    Commit,
    IssueCommentEvent,
    IssuesEvent,
    PullRequestEvent,
    ReleaseEvent,
    Repository,
    WatchEvent,
)

SHORT_ID_LENGTH = 6
SEP = " — "


def _one_line(text: str | None) -> str:
    """Collapse any line breaks so a notice always stays on one line."""
    if not text:
        return ""
    return " ".join(text.splitlines()).strip()


def _first_line(text: str | None) -> str:
    if not text:
        return ""
    return text.split("\n", 1)[0].rstrip("\r")


def short_id(commit_id: str | None) -> str:
    return (commit_id or "")[:SHORT_ID_LENGTH]


def repo_link(repo: Repository, *parts: object) -> str:
    base = _one_line(repo.html_url).rstrip("/")
    return "/".join([base, *(str(p) for p in parts)])


def _by(action: str, login: str) -> str:
    return f"{_one_line(action)} by @{_one_line(login)}"


def format_commit(repo: Repository, commit: Commit) -> str:
    return SEP.join(
        [
            repo_link(repo, "commit", _one_line(short_id(commit.id))),
            _one_line(_first_line(commit.message)),
            _one_line(commit.author.name),
        ]
    )


def format_pull_request(event: PullRequestEvent) -> str:
    return SEP.join(
        [
            repo_link(event.repository, "pull", event.number),
            "pull request " + _by(event.action, event.sender.login),
            _one_line(event.pull_request.title),
        ]
    )


def format_issue(event: IssuesEvent) -> str:
    return SEP.join(
        [
            repo_link(event.repository, "issues", event.issue.number),
            "Issue " + _by(event.action, event.sender.login),
            _one_line(event.issue.title),
        ]
    )


def format_issue_comment(event: IssueCommentEvent) -> str:
    return SEP.join(
        [
            repo_link(event.repository, "issues", event.issue.number),
            f"Comment on issue by @{_one_line(event.sender.login)}",
            _one_line(event.issue.title),
        ]
    )


def format_star(event: WatchEvent) -> str:
    return f"Starred by @{_one_line(event.sender.login)}! \\o/"


def format_release(event: ReleaseEvent) -> str:
    return (
        f"{_one_line(event.sender.login)} released {_one_line(event.release.tag_name)}"
        f" - {_one_line(event.release.html_url)}"
    )
