"""Ruter GH"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.responses import PlainTextResponse

from ghnotice.errors import WebhookError
from ghnotice.events import decode_event
from ghnotice.signature import pick_signature, require_signature

logger = logging.getLogger(__name__)

router = APIRouter(tags=["github"])


@router.post("/webhook", response_class=PlainTextResponse)
async def github_webhook(
    request: Request,
    x_hub_signature_256: str | None = Header(None),
    x_hub_signature: str | None = Header(None),
    x_github_event: str | None = Header(None),
    x_github_delivery: str | None = Header(None),
    content_type: str | None = Header(None),
):
    """
    GitHub webhook endpoint.

    The raw body is checked against `X-Hub-Signature-256` (or the legacy
    `X-Hub-Signature`) before anything is decoded, then the event named by
    `X-GitHub-Event` is turned into notices and forwarded.
    """
    body = await request.body()
    state = request.app.state
    delivery = x_github_delivery or "-"

    try:
        require_signature(
            state.settings.webhook_secret,
            body,
            pick_signature(x_hub_signature_256, x_hub_signature),
        )
        event = decode_event(x_github_event, body, content_type)
        result = await state.dispatcher.dispatch(event)
    except WebhookError as exc:
        logger.warning(
            "Delivery %s (%s) rejected with %d: %s",
            delivery,
            x_github_event or "unknown",
            exc.status_code,
            exc,
        )
        raise HTTPException(exc.status_code, str(exc)) from exc
    except Exception as exc:
        logger.exception("Delivery %s (%s) failed", delivery, x_github_event or "unknown")
        raise HTTPException(500, "internal error while handling event") from exc

    logger.info("Delivery %s handled: %s", delivery, result.outcome)
    return result.describe()
