"""Start-up wiring: logging, migrations, database manager, handlers."""

from __future__ import annotations

import os
from dataclasses import dataclass

from clipscore.config import Settings, load_settings, sanitize_dict
from clipscore.ledger.config.scoring_params import ScoringParams
from clipscore.ledger.database import DBM, initialize
from clipscore.ledger.handlers import Handlers
from clipscore.shared.clock import Clock
from clipscore.shared.logging import get_logger, setup_events_logger, setup_logging


@dataclass
class Ledger:
    settings: Settings
    database: DBM
    handlers: Handlers

    async def close(self) -> None:
        await self.database.dispose()


def configure_logging(settings: Settings) -> None:
    setup_logging(settings.logging.level, json_logs=settings.logging.json_logs)
    if settings.logging.events_dir:
        os.makedirs(settings.logging.events_dir, exist_ok=True)
        setup_events_logger(settings.logging.events_dir)


def open_ledger(
    settings: Settings | None = None,
    clock: Clock | None = None,
    params: ScoringParams | None = None,
) -> Ledger:
    """Configure logging, migrate the database to head and build the handlers.

    Call close() on the result when done.
    """
    settings = settings or load_settings()
    configure_logging(settings)
    get_logger("bootstrap").info({"settings": sanitize_dict(settings.model_dump())})

    url = initialize(settings)
    database = DBM(settings, url=url)
    return Ledger(settings=settings, database=database, handlers=Handlers(database, clock=clock, params=params))


__all__ = ["Ledger", "configure_logging", "open_ledger"]
