from __future__ import annotations

import os
from collections.abc import Generator
from dataclasses import replace
from typing import Callable, Sequence

import pytest

# Settings are read at import time
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("GITHUB_WEBHOOK_SECRET", "test-secret-123")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ghnotice.app import create_app
from ghnotice.config import Settings
from ghnotice.db import Base
from ghnotice.registry import FeedTarget
from tests.helpers import SECRET


class RecordingForwarder:
    """Stands in for the Telegram fan-out and remembers every batch."""

    def __init__(self):
        self.calls: list[tuple[tuple[FeedTarget, ...], str, list[str], str | None]] = []

    async def send_notices(
        self,
        targets: Sequence[FeedTarget],
        repo_full_name: str,
        notices: Sequence[str],
        event: str | None = None,
    ) -> int:
        self.calls.append((tuple(targets), repo_full_name, list(notices), event))
        return len(notices)

    @property
    def notices(self) -> list[str]:
        return [n for _, _, batch, _ in self.calls for n in batch]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        db_url="sqlite://",
        webhook_secret=SECRET,
        require_known_repo=False,
        unknown_repo_policy="reject",
        known_repos=frozenset(),
        forward_timeout_seconds=1.0,
    )


@pytest.fixture
def session_factory() -> Generator[sessionmaker, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


@pytest.fixture
def forwarder() -> RecordingForwarder:
    return RecordingForwarder()


@pytest.fixture
def make_client(
    settings: Settings, session_factory: sessionmaker, forwarder: RecordingForwarder
) -> Generator[Callable[..., TestClient], None, None]:
    clients: list[TestClient] = []

    def _make(**overrides) -> TestClient:
        app = create_app(
            replace(settings, **overrides),
            session_factory=session_factory,
            forwarder=forwarder,
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
