from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from clipscore.config import load_settings
from clipscore.config.db_url import build_sqlite_url
from clipscore.ledger.database import DBM
from clipscore.ledger.handlers import Handlers
from clipscore.shared.clock import FixedClock

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FixedClock(T0)


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.delenv("CLIPSCORE_DATABASE__URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("CLIPSCORE_CONFIG", raising=False)
    return load_settings(
        yaml_path=str(tmp_path / "missing.yaml"),
        test_mode=True,
        database={"path": str(tmp_path / "ledger.db")},
    )


@pytest_asyncio.fixture
async def dbm(settings):
    db = DBM(settings, url=build_sqlite_url(settings.database.path))
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture
def handlers(dbm, clock):
    return Handlers(dbm, clock=clock)


@pytest_asyncio.fixture
async def author(handlers):
    return await handlers.rewards.create_user("auth|author", name="Author")


@pytest_asyncio.fixture
async def binary_question(handlers, author):
    """Open time-weighted binary question closing ten days after T0."""
    return await handlers.resolution.create_question(
        title="Will it rain?",
        description="",
        kind="binary",
        close_time=T0 + timedelta(days=10),
        created_by=author,
    )
