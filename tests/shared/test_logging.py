import json
import logging


from clipscore.shared.logging import (
    EVENTS_LEVEL_NUM,
    ROOT_LOGGER_NAME,
    StructuredFormatter,
    get_logger,
    setup_events_logger,
    setup_logging,
)


def _record(msg):
    return logging.LogRecord("clipscore.test", logging.INFO, __file__, 1, msg, None, None)


class TestStructuredFormatter:
    def test_dict_message_rendered_as_json(self):
        line = StructuredFormatter(json_logs=True).format(_record({"submit_forecast": {"user_id": 1}}))
        payload = json.loads(line)
        assert payload["msg"] == {"submit_forecast": {"user_id": 1}}
        assert payload["level"] == "INFO"
        assert payload["logger"] == "clipscore.test"

    def test_plain_text(self):
        line = StructuredFormatter(json_logs=False).format(_record("hello"))
        assert line.endswith("| INFO | clipscore.test | hello")


def test_get_logger_namespaced():
    assert get_logger("intake").name == "clipscore.intake"


def test_setup_logging_replaces_own_handler():
    logger = setup_logging("debug", json_logs=False)
    setup_logging("info")
    own = [h for h in logger.handlers if getattr(h, "_clipscore_handler", False)]
    try:
        assert len(own) == 1
        assert logger.level == logging.INFO
        assert logger.name == ROOT_LOGGER_NAME
    finally:
        for h in own:
            logger.removeHandler(h)


def test_setup_events_logger_writes_file(tmp_path):
    logger = setup_events_logger(str(tmp_path), events_retention_size=1024)
    try:
        logger.event("question resolved")
        for h in logger.handlers:
            h.flush()
        content = (tmp_path / "events.log").read_text()
        assert "EVENT" in content
        assert "question resolved" in content
        assert logging.getLevelName(EVENTS_LEVEL_NUM) == "EVENT"
    finally:
        for h in list(logger.handlers):
            h.close()
            logger.removeHandler(h)
