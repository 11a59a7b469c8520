"""Telegram fan-out for finished notices."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, Sequence

import httpx

from ghnotice.config import settings
from ghnotice.registry import FeedTarget

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 15
MESSAGE_LIMIT = 4096

JSONDict = dict[str, Any]
ClientFactory = Callable[[], httpx.AsyncClient]


class TelegramError(RuntimeError):
    """Telegram answered with a non-2xx status or `ok: false`."""


def _default_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS)


async def send_message(
    client: httpx.AsyncClient,
    token: str,
    chat_id: int | str,
    text: str,
    topic_id: Optional[int] = None,
    *,
    api_base: str = settings.telegram_api_base,
    disable_web_page_preview: bool = True,
) -> JSONDict:
    """Send one plain-text message."""
    api = f"{api_base.rstrip('/')}/bot{token}/sendMessage"
    payload: JSONDict = {
        "chat_id": chat_id,
        "text": text[:MESSAGE_LIMIT],
        "disable_web_page_preview": disable_web_page_preview,
    }
    if topic_id is not None:
        payload["message_thread_id"] = topic_id

    resp = await client.post(api, json=payload)
    try:
        data = resp.json()
    except ValueError:
        data = {}
    if resp.status_code >= 300 or not data.get("ok", True):
        raise TelegramError(f"Telegram error: {resp.status_code} {resp.text}")
    return data


class NoticeForwarder:
    """
    Sends notice batches to every matching feed.

    The whole batch is bounded by `timeout`; a timeout or any delivery error
    is logged and dropped so the webhook response never depends on it.
    """

    def __init__(
        self,
        *,
        timeout: float = settings.forward_timeout_seconds,
        api_base: str = settings.telegram_api_base,
        client_factory: ClientFactory = _default_client,
    ):
        self.timeout = timeout
        self.api_base = api_base
        self.client_factory = client_factory

    async def _deliver(self, targets: Sequence[FeedTarget], notices: Sequence[str]) -> int:
        sent = 0
        async with self.client_factory() as client:
            for target in targets:
                for notice in notices:
                    try:
                        await send_message(
                            client,
                            target.bot_token,
                            target.chat_id,
                            notice,
                            topic_id=target.topic_id,
                            api_base=self.api_base,
                        )
                    except (httpx.HTTPError, TelegramError) as exc:
                        logger.warning("Failed to send notice to %s: %s", target.label, exc)
                        break
                    sent += 1
        return sent

    async def send_notices(
        self,
        targets: Sequence[FeedTarget],
        repo_full_name: str,
        notices: Sequence[str],
        event: str | None = None,
    ) -> int:
        """Forward `notices` in order to the targets routed for `repo_full_name`."""
        selected = [t for t in targets if t.accepts(repo_full_name, event)]
        if not notices or not selected:
            logger.debug(
                "Nothing to forward for %s (%d notice(s), %d target(s))",
                repo_full_name,
                len(notices),
                len(selected),
            )
            return 0
        try:
            sent = await asyncio.wait_for(self._deliver(selected, notices), self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Forwarding %d notice(s) for %s timed out after %ss",
                len(notices),
                repo_full_name,
                self.timeout,
            )
            return 0
        except Exception:
            logger.exception("Forwarding notices for %s failed", repo_full_name)
            return 0
        logger.info("Forwarded %d message(s) for %s", sent, repo_full_name)
        return sent
