from __future__ import annotations

import os
from time import monotonic

from alembic import command
from alembic.config import Config as AlembicConfig
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import make_url

from clipscore.config import Settings
from clipscore.config.db_url import resolve_database_url, to_sync_url
from clipscore.shared.logging import get_logger

logger = get_logger("database")


def alembic_env_path() -> str:
    """Return path to the ledger Alembic env (shipped alongside this package)."""
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "alembic"))


def alembic_ini_path() -> str:
    return os.path.join(alembic_env_path(), "alembic.ini")


def initialize(settings: Settings) -> str:
    """
    Ensure the ledger database exists and Alembic migrations are applied.

    Returns:
        The async database URL the DBM should connect to.
    """
    url = resolve_database_url(settings)
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database:
        db_path = os.path.abspath(parsed.database)
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
        if not os.path.exists(db_path):
            logger.info({"ledger_db": {"message": "creating sqlite db", "path": db_path}})
            open(db_path, "a", encoding="utf-8").close()

    upgrade_database(db_url=to_sync_url(url))
    return url


def upgrade_database(*, db_url: str) -> None:
    """Run Alembic upgrade head against a synchronous database URL."""
    alembic_config = AlembicConfig(alembic_ini_path())
    alembic_config.set_main_option("script_location", alembic_env_path())
    alembic_config.set_main_option("sqlalchemy.url", db_url)

    script_directory = ScriptDirectory.from_config(alembic_config)
    head_revision = script_directory.get_current_head()
    current_revision = _get_database_revision(db_url)

    if head_revision is not None and current_revision == head_revision:
        logger.info({"ledger_db": {"event": "alembic_upgrade_skip", "revision": current_revision}})
        return

    started = monotonic()
    logger.info({"ledger_db": {"event": "alembic_upgrade_start", "from": current_revision, "to": head_revision}})
    try:
        command.upgrade(alembic_config, "head")
    except Exception as exc:
        logger.error({"ledger_db": {"event": "alembic_upgrade_error", "error": str(exc)}})
        raise
    logger.info(
        {
            "ledger_db": {
                "event": "alembic_upgrade_complete",
                "elapsed_seconds": round(monotonic() - started, 3),
            }
        }
    )


def _get_database_revision(db_url: str) -> str | None:
    engine = create_engine(db_url, future=True)
    try:
        with engine.connect() as connection:
            inspector = inspect(connection)
            if "alembic_version" not in inspector.get_table_names():
                return None
            result = connection.execute(text("select version_num from alembic_version limit 1"))
            return result.scalar()
    finally:
        engine.dispose()


__all__ = ["initialize", "upgrade_database", "alembic_env_path", "alembic_ini_path"]
