from __future__ import annotations

import os
from typing import Any


def build_sqlite_url(path: str, *, async_driver: bool = True) -> str:
    driver = "sqlite+aiosqlite" if async_driver else "sqlite"
    return f"{driver}:///{os.path.abspath(path)}"


def to_sync_url(url: str) -> str:
    """Swap an async driver for its sync counterpart (used by Alembic)."""
    return url.replace("+aiosqlite", "")


def resolve_database_url(settings: Any) -> str:
    """Return the async database URL for the given settings.

    Precedence: CLIPSCORE_DATABASE__URL / DATABASE_URL env, explicit
    settings.database.url, then a SQLite file under the data directory.
    """
    env_url = os.getenv("CLIPSCORE_DATABASE__URL") or os.getenv("DATABASE_URL")
    if env_url:
        return env_url
    db = getattr(settings, "database", None)
    if db is not None and getattr(db, "url", None):
        return db.url
    test_mode = bool(getattr(settings, "test_mode", False))
    return build_sqlite_url(db.database_path(test_mode))


__all__ = [
    "build_sqlite_url",
    "to_sync_url",
    "resolve_database_url",
]
