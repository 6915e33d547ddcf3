import json
import logging
import os
from logging.handlers import RotatingFileHandler

EVENTS_LEVEL_NUM = 38
DEFAULT_LOG_BACKUP_COUNT = 10
DEFAULT_EVENTS_RETENTION_SIZE = 2 * 1024 * 1024

ROOT_LOGGER_NAME = "clipscore"


class StructuredFormatter(logging.Formatter):
    """Render dict log messages as JSON objects, everything else as text."""

    def __init__(self, json_logs: bool = True):
        super().__init__(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.json_logs = json_logs

    def format(self, record: logging.LogRecord) -> str:
        if not self.json_logs:
            return super().format(record)
        payload = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict):
            payload["msg"] = record.msg
        else:
            payload["msg"] = record.getMessage()
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, sort_keys=True)


def get_logger(component: str) -> logging.Logger:
    """Logger for a ledger component, e.g. get_logger("intake")."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")


def setup_logging(level: str = "INFO", json_logs: bool = True) -> logging.Logger:
    """Attach a single stream handler to the package root logger.

    Safe to call repeatedly; existing handlers installed here are replaced.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        if getattr(handler, "_clipscore_handler", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(json_logs=json_logs))
    handler._clipscore_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger


def setup_events_logger(full_path, events_retention_size=DEFAULT_EVENTS_RETENTION_SIZE):
    logging.addLevelName(EVENTS_LEVEL_NUM, "EVENT")

    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.event")
    logger.setLevel(EVENTS_LEVEL_NUM)

    def event(self, message, *args, **kws):
        if self.isEnabledFor(EVENTS_LEVEL_NUM):
            self._log(EVENTS_LEVEL_NUM, message, args, **kws)

    logging.Logger.event = event

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(
        os.path.join(full_path, "events.log"),
        maxBytes=events_retention_size,
        backupCount=DEFAULT_LOG_BACKUP_COUNT,
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(EVENTS_LEVEL_NUM)
    logger.addHandler(file_handler)

    return logger
