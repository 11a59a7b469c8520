"""
Typed GitHub webhook events.

Only the fields used to build notices are modelled; everything else in a
payload is ignored. `decode_event` maps the `X-GitHub-Event` name and the
raw body onto one of the models below.
"""

from __future__ import annotations

import enum
from typing import ClassVar, Optional, Union
from urllib.parse import parse_qs

from pydantic import BaseModel, ValidationError

from ghnotice.errors import DecodeError, UnsupportedEvent

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class EventKind(str, enum.Enum):
    PING = "ping"
    PUSH = "push"
    PULL_REQUEST = "pull_request"
    ISSUES = "issues"
    ISSUE_COMMENT = "issue_comment"
    WATCH = "watch"
    RELEASE = "release"


class Repository(BaseModel):
    full_name: str
    html_url: str


class Account(BaseModel):
    login: str


class CommitAuthor(BaseModel):
    name: str = ""


class Commit(BaseModel):
    id: str
    message: str
    author: CommitAuthor = CommitAuthor()


class PullRequest(BaseModel):
    title: str


class Issue(BaseModel):
    number: int
    title: str


class Release(BaseModel):
    tag_name: str
    html_url: str


class PingEvent(BaseModel):
    kind: ClassVar[EventKind] = EventKind.PING

    zen: str = ""
    hook_id: Optional[int] = None
    repository: Optional[Repository] = None


class PushEvent(BaseModel):
    kind: ClassVar[EventKind] = EventKind.PUSH

    ref: str = ""
    repository: Repository
    commits: list[Commit] = []


class PullRequestEvent(BaseModel):
    kind: ClassVar[EventKind] = EventKind.PULL_REQUEST

    action: str
    number: int
    pull_request: PullRequest
    repository: Repository
    sender: Account


class IssuesEvent(BaseModel):
    kind: ClassVar[EventKind] = EventKind.ISSUES

    action: str
    issue: Issue
    repository: Repository
    sender: Account


class IssueCommentEvent(BaseModel):
    kind: ClassVar[EventKind] = EventKind.ISSUE_COMMENT

    action: str
    issue: Issue
    repository: Repository
    sender: Account


class WatchEvent(BaseModel):
    kind: ClassVar[EventKind] = EventKind.WATCH

    action: str = "started"
    repository: Repository
    sender: Account


class ReleaseEvent(BaseModel):
    kind: ClassVar[EventKind] = EventKind.RELEASE

    action: str = ""
    release: Release
    repository: Repository
    sender: Account


Event = Union[
    PingEvent,
    PushEvent,
    PullRequestEvent,
    IssuesEvent,
    IssueCommentEvent,
    WatchEvent,
    ReleaseEvent,
]

EVENT_MODELS: dict[EventKind, type[BaseModel]] = {
    EventKind.PING: PingEvent,
    EventKind.PUSH: PushEvent,
    EventKind.PULL_REQUEST: PullRequestEvent,
    EventKind.ISSUES: IssuesEvent,
    EventKind.ISSUE_COMMENT: IssueCommentEvent,
    EventKind.WATCH: WatchEvent,
    EventKind.RELEASE: ReleaseEvent,
}


def parse_kind(name: str | None) -> EventKind:
    """Return the `EventKind` for a header value or raise `UnsupportedEvent`."""
    key = (name or "").strip()
    try:
        return EventKind(key.lower())
    except ValueError:
        raise UnsupportedEvent(key or "unknown") from None


def _json_payload(body: bytes, content_type: str | None) -> bytes | str:
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type != FORM_CONTENT_TYPE:
        return body
    try:
        form = parse_qs(body.decode("utf-8"), strict_parsing=True)
    except (UnicodeDecodeError, ValueError) as exc:
        raise DecodeError(f"invalid form body: {exc}") from exc
    values = form.get("payload")
    if not values:
        raise DecodeError("form body has no payload field")
    return values[0]


def decode_event(name: str | None, body: bytes, content_type: str | None = None) -> Event:
    """
    Decode a delivery into its typed event.

    Raises `UnsupportedEvent` for kinds without a model (before looking at
    the body) and `DecodeError` for malformed or mismatching payloads.
    """
    kind = parse_kind(name)
    model = EVENT_MODELS[kind]
    raw = _json_payload(body, content_type)
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise DecodeError(f"cannot decode {kind.value} payload: {exc}") from exc
