"""
Process-wide, read-only routing data.

Built once at startup from the database and the environment, then shared
by every request. Nothing here is mutated after `load_registry` returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ghnotice.config import Settings
from ghnotice.errors import UnknownRepository
from ghnotice.models import Feed, KnownRepository

logger = logging.getLogger(__name__)

WILDCARD = "*"


def normalize_repo_url(url: str) -> str:
    return (url or "").strip().rstrip("/")


def _split_csv(value: str | None) -> frozenset[str]:
    if not value or value.strip() == WILDCARD:
        return frozenset()
    return frozenset(e.strip().lower() for e in value.split(",") if e.strip())


@dataclass(frozen=True)
class FeedTarget:
    """Where notices for one repository (or `*`) are sent."""

    bot_token: str
    chat_id: str
    repo: str = WILDCARD
    topic_id: Optional[int] = None
    title: str = ""
    events: frozenset[str] = frozenset()

    def accepts(self, repo_full_name: str, event: str | None = None) -> bool:
        if self.repo != WILDCARD and self.repo.lower() != (repo_full_name or "").lower():
            return False
        if event and self.events and event.lower() not in self.events:
            return False
        return True

    @property
    def label(self) -> str:
        return self.title.strip() if self.title else self.chat_id


@dataclass(frozen=True)
class AuthorizedRepoSet:
    urls: frozenset[str] = frozenset()

    @classmethod
    def from_urls(cls, urls: Iterable[str]) -> "AuthorizedRepoSet":
        return cls(frozenset(normalize_repo_url(u) for u in urls if normalize_repo_url(u)))

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and normalize_repo_url(url) in self.urls

    def __len__(self) -> int:
        return len(self.urls)


@dataclass(frozen=True)
class Registry:
    feeds: tuple[FeedTarget, ...] = ()
    known_repos: AuthorizedRepoSet = field(default_factory=AuthorizedRepoSet)
    gate_enabled: bool = False

    def authorize(self, repo_url: str) -> None:
        """Raise `UnknownRepository` when the gate is on and the URL is not known."""
        if not self.gate_enabled:
            return
        if repo_url not in self.known_repos:
            raise UnknownRepository(repo_url)


def feed_target_from_row(row: Feed) -> FeedTarget:
    return FeedTarget(
        bot_token=row.bot_token,
        chat_id=str(row.chat_id),
        repo=(row.repo or WILDCARD).strip() or WILDCARD,
        topic_id=row.topic_id,
        title=row.title or "",
        events=_split_csv(row.events_csv),
    )


def load_registry(session: Session, settings: Settings) -> Registry:
    """Read feeds and known repositories once and freeze them."""
    feeds = tuple(feed_target_from_row(row) for row in session.query(Feed).order_by(Feed.id))
    urls = [row.url for row in session.query(KnownRepository).all()]
    urls.extend(settings.known_repos)
    registry = Registry(
        feeds=feeds,
        known_repos=AuthorizedRepoSet.from_urls(urls),
        gate_enabled=settings.require_known_repo,
    )
    logger.info(
        "Loaded %d feed(s), %d known repositories (gate %s)",
        len(registry.feeds),
        len(registry.known_repos),
        "on" if registry.gate_enabled else "off",
    )
    if registry.gate_enabled and not registry.known_repos:
        logger.warning("Repository gate is on but no known repositories are configured")
    return registry
