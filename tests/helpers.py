"""Payload builders and signing helpers shared by the tests."""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any

SECRET = "test-secret-123"
REPO_URL = "https://example.com/org/repo"
REPO_FULL_NAME = "org/repo"


def sign(body: bytes, secret: str = SECRET, algo: str = "sha256") -> str:
    return f"{algo}=" + hmac.new(secret.encode(), body, getattr(hashlib, algo)).hexdigest()


def repository(url: str = REPO_URL, full_name: str = REPO_FULL_NAME) -> dict[str, Any]:
    return {
        "full_name": full_name,
        "html_url": url,
        "url": url.replace("https://example.com/", "https://api.example.com/repos/"),
    }


def commit(commit_id: str, message: str, author: str = "alice") -> dict[str, Any]:
    return {
        "id": commit_id,
        "message": message,
        "author": {"name": author, "email": f"{author}@example.com", "username": author},
    }


def push_payload(*commits: dict[str, Any], **repo: str) -> dict[str, Any]:
    return {
        "ref": "refs/heads/main",
        "repository": repository(**repo),
        "pusher": {"name": "alice"},
        "sender": {"login": "alice"},
        "commits": list(commits),
    }


def pull_request_payload(
    action: str = "opened", number: int = 42, login: str = "bob", title: str = "Fix bug"
) -> dict[str, Any]:
    return {
        "action": action,
        "number": number,
        "pull_request": {"number": number, "title": title, "merged": False},
        "repository": repository(),
        "sender": {"login": login},
    }


def issues_payload(
    action: str = "opened", number: int = 7, login: str = "dave", title: str = "Crash on start"
) -> dict[str, Any]:
    return {
        "action": action,
        "issue": {"number": number, "title": title},
        "repository": repository(),
        "sender": {"login": login},
    }


def issue_comment_payload(
    action: str = "created", number: int = 7, login: str = "erin", title: str = "Crash on start"
) -> dict[str, Any]:
    return {
        "action": action,
        "issue": {"number": number, "title": title},
        "comment": {"body": "me too"},
        "repository": repository(),
        "sender": {"login": login},
    }


def watch_payload(login: str = "carol") -> dict[str, Any]:
    return {"action": "started", "repository": repository(), "sender": {"login": login}}


def release_payload(login: str = "frank", tag: str = "v1.2.0") -> dict[str, Any]:
    return {
        "action": "published",
        "release": {
            "tag_name": tag,
            "html_url": f"{REPO_URL}/releases/tag/{tag}",
        },
        "repository": repository(),
        "sender": {"login": login},
    }


def ping_payload() -> dict[str, Any]:
    return {"zen": "Keep it logically awesome.", "hook_id": 1, "repository": repository()}


def encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode()
