"""the beautiful world start from here."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from ghnotice import db
from ghnotice.config import Settings, settings as default_settings
from ghnotice.registry import load_registry
from ghnotice.routers import info, webhook
from ghnotice.services.dispatch import Dispatcher, Forwarder
from ghnotice.services.forwarder import NoticeForwarder

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    session_factory: Optional[sessionmaker] = None,
    forwarder: Optional[Forwarder] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Feeds and known repositories are read once in the lifespan hook; the
    resulting registry is shared read-only by every request.
    """
    settings = settings or default_settings
    session_factory = session_factory or db.SessionLocal

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.Base.metadata.create_all(session_factory.kw["bind"])
        with session_factory() as session:
            registry = load_registry(session, settings)
        if not settings.webhook_secret:
            logger.warning("GITHUB_WEBHOOK_SECRET is empty; every delivery will be rejected")
        app.state.settings = settings
        app.state.registry = registry
        app.state.dispatcher = Dispatcher(
            registry,
            forwarder or NoticeForwarder(
                timeout=settings.forward_timeout_seconds,
                api_base=settings.telegram_api_base,
            ),
            merge_pattern=settings.merge_commit_pattern,
            unknown_repo_policy=settings.unknown_repo_policy,
        )
        yield

    app = FastAPI(title="GitHub → Notice receiver", lifespan=lifespan)
    app.include_router(info.router)
    app.include_router(webhook.router)
    return app


logging.basicConfig(
    level=default_settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = create_app()
