"""models for DBs"""

from __future__ import annotations

import datetime as dt

from sqlalchemy import Column, DateTime, Integer, String

from .db import Base


def now_utc() -> dt.datetime:
    return dt.datetime.now(tz=dt.timezone.utc)


class Feed(Base):
    """
    A notification routing target.

    `repo` is a repository full name (`owner/repo`) or `*` for every
    repository; `events_csv` narrows the event kinds forwarded to it.
    """

    __tablename__ = "feeds"
    id = Column(Integer, primary_key=True)
    repo = Column(String, index=True, default="*")
    bot_token = Column(String, nullable=False)
    chat_id = Column(String, nullable=False)
    topic_id = Column(Integer, nullable=True)
    title = Column(String, default="")
    events_csv = Column(String, default="*")
    created_at = Column(DateTime, default=now_utc)


class KnownRepository(Base):
    """Repositories allowed through the authorization gate."""

    __tablename__ = "known_repositories"
    id = Column(Integer, primary_key=True)
    url = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=now_utc)
