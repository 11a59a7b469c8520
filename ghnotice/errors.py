"""Errors raised while handling a webhook delivery."""

from __future__ import annotations


class WebhookError(Exception):
    """Base class; `status_code` is the HTTP status the router answers with."""

    status_code = 500


class Unauthorized(WebhookError):
    """Signature header missing, malformed, or not matching the body."""

    status_code = 401


class DecodeError(WebhookError):
    """Body is not valid JSON or does not fit the event kind's schema."""

    status_code = 500


class UnsupportedEvent(WebhookError):
    status_code = 404

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"event type {kind} not implemented")


class UnknownRepository(WebhookError):
    status_code = 500

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"unknown repo: {url}")
