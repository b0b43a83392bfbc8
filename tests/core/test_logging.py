import json
import logging

import pytest

from reddit_relay.core.logging import configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def test_records_are_json_with_extra_fields(restore_root_logger, capsys):
    configure_logging("debug", app_env="test")

    logging.getLogger("reddit_relay.test").info("Received %s", "t1_a", extra={"channel": "comments"})

    line = capsys.readouterr().out.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "Received t1_a"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "reddit_relay.test"
    assert payload["channel"] == "comments"
    assert payload["service"] == "reddit-relay"
    assert payload["env"] == "test"
    assert restore_root_logger.level == logging.DEBUG


def test_repeated_calls_keep_one_handler(restore_root_logger):
    configure_logging()
    configure_logging()

    assert len(restore_root_logger.handlers) == 1
    assert logging.getLogger("httpx").level == logging.WARNING
