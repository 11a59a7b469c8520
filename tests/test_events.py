from __future__ import annotations

import json
from urllib.parse import urlencode

import pytest

from ghnotice.errors import DecodeError, UnsupportedEvent
from ghnotice.events import (
    EventKind,
    IssueCommentEvent,
    PingEvent,
    PullRequestEvent,
    PushEvent,
    ReleaseEvent,
    WatchEvent,
    decode_event,
    parse_kind,
)
from tests.helpers import (
    commit,
    encode,
    issue_comment_payload,
    ping_payload,
    pull_request_payload,
    push_payload,
    release_payload,
    watch_payload,
)


def test_decode_push():
    event = decode_event("push", encode(push_payload(commit("abc", "msg"))))
    assert isinstance(event, PushEvent)
    assert event.kind is EventKind.PUSH
    assert event.repository.full_name == "org/repo"
    assert event.commits[0].author.name == "alice"


def test_decode_push_without_commits():
    payload = push_payload()
    del payload["commits"]
    event = decode_event("push", encode(payload))
    assert event.commits == []


@pytest.mark.parametrize(
    "kind,payload,model",
    [
        ("ping", ping_payload(), PingEvent),
        ("pull_request", pull_request_payload(), PullRequestEvent),
        ("issue_comment", issue_comment_payload(), IssueCommentEvent),
        ("watch", watch_payload(), WatchEvent),
        ("release", release_payload(), ReleaseEvent),
    ],
)
def test_decode_known_kinds(kind, payload, model):
    assert isinstance(decode_event(kind, encode(payload)), model)


def test_kind_header_is_case_insensitive():
    assert parse_kind(" Push ") is EventKind.PUSH


@pytest.mark.parametrize("kind", ["fork", "check_run", "", None])
def test_unsupported_kind(kind):
    with pytest.raises(UnsupportedEvent) as exc:
        decode_event(kind, b"not even json")
    assert exc.value.status_code == 404


def test_unsupported_kind_is_named():
    with pytest.raises(UnsupportedEvent, match="deployment_status"):
        decode_event("deployment_status", b"{}")


def test_malformed_json():
    with pytest.raises(DecodeError):
        decode_event("push", b"{not json")


def test_schema_mismatch():
    payload = pull_request_payload()
    del payload["sender"]
    with pytest.raises(DecodeError):
        decode_event("pull_request", encode(payload))


def test_form_encoded_payload():
    body = urlencode({"payload": json.dumps(watch_payload("carol"))}).encode()
    event = decode_event("watch", body, "application/x-www-form-urlencoded")
    assert event.sender.login == "carol"


def test_form_without_payload_field():
    with pytest.raises(DecodeError):
        decode_event("watch", b"other=1", "application/x-www-form-urlencoded")


def test_unsupported_kind_named_as_sent():
    with pytest.raises(UnsupportedEvent) as exc:
        decode_event(" Deployment_Status ", b"{}")
    assert exc.value.kind == "Deployment_Status"
    assert "Deployment_Status" in str(exc.value)
