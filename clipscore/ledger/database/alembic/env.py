"""Alembic environment for the ledger schema.

upgrade_database() sets sqlalchemy.url; when run by hand through the alembic
CLI the URL falls back to the one the ledger settings resolve to.
"""
from __future__ import annotations

from alembic import context
from sqlalchemy import create_engine, pool

from clipscore.config import load_settings
from clipscore.config.db_url import resolve_database_url, to_sync_url
from clipscore.ledger.database.schema import metadata

config = context.config


def _database_url() -> str:
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    return to_sync_url(resolve_database_url(load_settings()))


def _configure(**kwargs) -> None:
    # Batch mode: SQLite cannot ALTER most constraints in place.
    context.configure(
        target_metadata=metadata,
        render_as_batch=True,
        compare_type=True,
        **kwargs,
    )


def run_offline() -> None:
    _configure(url=_database_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    engine = create_engine(_database_url(), poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            _configure(connection=connection)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
