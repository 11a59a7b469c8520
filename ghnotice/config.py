"""Service settings, read from the environment (and `.env`)."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_MERGE_COMMIT_PATTERN = (
    r"^Merge (branch|pull request|remote-tracking branch|tag) "
)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """App Settings"""

    db_url: str = os.getenv("DB_URL", "sqlite:///./ghnotice.sqlite3")
    webhook_secret: str = os.getenv("GITHUB_WEBHOOK_SECRET", "")
    merge_commit_pattern: str = os.getenv(
        "MERGE_COMMIT_PATTERN", DEFAULT_MERGE_COMMIT_PATTERN
    )
    require_known_repo: bool = _env_flag("REQUIRE_KNOWN_REPO")
    unknown_repo_policy: str = os.getenv("UNKNOWN_REPO_POLICY", "reject").strip().lower()
    known_repos: frozenset[str] = frozenset(
        s.strip() for s in os.getenv("KNOWN_REPOS", "").split(",") if s.strip()
    )
    forward_timeout_seconds: float = float(os.getenv("FORWARD_TIMEOUT_SECONDS", "10"))
    telegram_api_base: str = os.getenv("TELEGRAM_API_BASE", "https://api.telegram.org")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
