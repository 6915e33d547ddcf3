"""
Database manager for the ledger.

SQLite (via aiosqlite) is the default store; every public operation runs
inside a single transaction opened with transaction().
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import event
from sqlalchemy.engine import Result
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.sql.elements import ClauseElement, TextClause

from clipscore.config import Settings
from clipscore.config.db_url import resolve_database_url


def set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
    # Per-connection pragmas: WAL for concurrent readers, FK enforcement for cascades.
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def _check_query(query: Any) -> None:
    if isinstance(query, str):
        raise TypeError("wrap raw SQL in sqlalchemy.text()")
    if not isinstance(query, (TextClause, ClauseElement)):
        raise TypeError(f"unsupported query type {type(query).__name__}")


class DBM:
    def __init__(self, settings: Settings, url: str | None = None):
        self.settings = settings
        self.url = url or resolve_database_url(settings)

        self.engine: AsyncEngine = create_async_engine(
            self.url,
            echo=settings.database.echo,
            future=True,
        )
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", set_sqlite_pragma)

        self.session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_maker() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Session inside BEGIN ... COMMIT; any exception rolls everything back."""
        async with self.session_maker() as session:
            async with session.begin():
                yield session

    async def read(self, query: Any, params: dict | None = None) -> list[Any]:
        """Execute a read-only statement and return all rows as mappings."""
        _check_query(query)
        async with self.session() as session:
            result: Result = await session.execute(query, params or {})
            return list(result.mappings().all())

    async def write(self, query: Any, params: dict | None = None) -> int:
        """Run one parameterized write in its own transaction; returns rows affected."""
        _check_query(query)
        if not params:
            raise ValueError("writes must be parameterized")

        async with self.transaction() as session:
            result: Result = await session.execute(query, params)
            return result.rowcount or 0

    async def create_all(self) -> None:
        """Create every table directly from metadata (tests and scratch stores)."""
        from .schema import metadata

        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


__all__ = ["DBM", "set_sqlite_pragma"]
