"""Runtime settings read from the environment (and a local .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .core.urls import DEFAULT_PLACEHOLDER_HOSTS

DEFAULT_DB_PATH = Path(".data") / "bookshelf.db"
DEFAULT_SYNC_DELAY = 0.8  # seconds between books that hit the providers
DEFAULT_TIMEOUT = 10.0


@dataclass
class Settings:
    db_path: Path = DEFAULT_DB_PATH
    google_books_api_key: str = ""
    ol_contact_email: str = ""
    sync_delay: float = DEFAULT_SYNC_DELAY
    provider_timeout: float = DEFAULT_TIMEOUT
    placeholder_hosts: tuple[str, ...] = DEFAULT_PLACEHOLDER_HOSTS
    port: int = 8000
    env: str = "dev"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> Settings:
        if env is None:
            load_dotenv()
            env = dict(os.environ)

        hosts = tuple(
            h.strip() for h in env.get("PLACEHOLDER_HOSTS", "").split(",") if h.strip()
        )
        return cls(
            db_path=Path(env.get("BOOKSHELF_DB", str(DEFAULT_DB_PATH))),
            google_books_api_key=env.get("GOOGLE_BOOKS_API_KEY", ""),
            ol_contact_email=env.get("OL_CONTACT_EMAIL", ""),
            sync_delay=float(env.get("COVER_SYNC_DELAY", DEFAULT_SYNC_DELAY)),
            provider_timeout=float(env.get("PROVIDER_TIMEOUT", DEFAULT_TIMEOUT)),
            placeholder_hosts=hosts or DEFAULT_PLACEHOLDER_HOSTS,
            port=int(env.get("PORT", "8000")),
            env=env.get("ENV", "dev"),
            log_level=env.get("LOG_LEVEL", "INFO"),
        )
