"""
Manage feeds and known repositories.

    python -m ghnotice.manage init-db
    python -m ghnotice.manage add-feed --token 123:AA... --chat-id -1001234 --repo owner/repo
    python -m ghnotice.manage add-repo https://github.com/owner/repo
    python -m ghnotice.manage list

Changes are picked up on the next service start.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from ghnotice import db
from ghnotice.models import Feed, KnownRepository
from ghnotice.registry import WILDCARD, normalize_repo_url
from ghnotice.utils import bot_id_from_token


class ManageError(ValueError):
    """Raised when a command gets invalid input."""


def add_feed(
    session: Session,
    token: str,
    chat_id: str,
    *,
    repo: str = WILDCARD,
    topic_id: Optional[int] = None,
    title: str = "",
    events: str = WILDCARD,
) -> Feed:
    if not bot_id_from_token(token):
        raise ManageError("Invalid token format.")
    if topic_id is not None and topic_id <= 0:
        raise ManageError("Topic id must be a positive integer.")
    feed = Feed(
        repo=(repo or WILDCARD).strip(),
        bot_token=token,
        chat_id=str(chat_id).strip(),
        topic_id=topic_id,
        title=title,
        events_csv=events or WILDCARD,
    )
    session.add(feed)
    session.commit()
    return feed


def add_known_repo(session: Session, url: str) -> KnownRepository:
    norm = normalize_repo_url(url)
    if not norm.startswith(("http://", "https://")):
        raise ManageError(f"Not a repository URL: {url}")
    row = session.query(KnownRepository).filter_by(url=norm).first()
    if not row:
        row = KnownRepository(url=norm)
        session.add(row)
        session.commit()
    return row


def _mask_token(token: str) -> str:
    bot_id = bot_id_from_token(token) or "?"
    return f"{bot_id}:…"


def _list(session: Session) -> list[str]:
    lines = ["feeds:"]
    for f in session.query(Feed).order_by(Feed.id):
        topic = f" topic={f.topic_id}" if f.topic_id else ""
        lines.append(
            f"  #{f.id} repo={f.repo} chat={f.chat_id}{topic}"
            f" bot={_mask_token(f.bot_token)} events={f.events_csv}"
        )
    lines.append("known repositories:")
    for r in session.query(KnownRepository).order_by(KnownRepository.url):
        lines.append(f"  {r.url}")
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ghnotice.manage", description=__doc__.split("\n\n")[0].strip())
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the tables.")

    feed = sub.add_parser("add-feed", help="Route notices to a Telegram chat.")
    feed.add_argument("--token", required=True, help="Telegram bot token")
    feed.add_argument("--chat-id", required=True)
    feed.add_argument("--repo", default=WILDCARD, help="owner/repo, or * for all")
    feed.add_argument("--topic-id", type=int, default=None)
    feed.add_argument("--title", default="")
    feed.add_argument("--events", default=WILDCARD, help="comma-separated event kinds")

    repo = sub.add_parser("add-repo", help="Allow a repository through the gate.")
    repo.add_argument("url")

    sub.add_parser("list", help="Show feeds and known repositories.")
    return parser


def main(argv: Optional[Sequence[str]] = None, session_factory=None) -> int:
    args = build_parser().parse_args(argv)
    session_factory = session_factory or db.SessionLocal
    db.Base.metadata.create_all(session_factory.kw["bind"])

    with session_factory() as session:
        try:
            if args.command == "init-db":
                print("tables created")
            elif args.command == "add-feed":
                feed = add_feed(
                    session,
                    args.token,
                    args.chat_id,
                    repo=args.repo,
                    topic_id=args.topic_id,
                    title=args.title,
                    events=args.events,
                )
                print(f"feed #{feed.id} added for {feed.repo}")
            elif args.command == "add-repo":
                row = add_known_repo(session, args.url)
                print(f"known repository {row.url}")
            elif args.command == "list":
                print("\n".join(_list(session)))
        except ManageError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
