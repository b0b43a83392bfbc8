# reddit_relay/core/logging.py
from __future__ import annotations

import logging
import sys
from pythonjsonlogger import jsonlogger

# Libraries that log every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO", app_env: str | None = None) -> logging.Handler:
    """
    Send every record to stdout as one JSON object per line.

    ``extra=`` fields passed at call sites (channel, author, counters)
    become top-level keys of the JSON object.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    static_fields = {"service": "reddit-relay"}
    if app_env:
        static_fields["env"] = app_env

    handler = logging.StreamHandler(sys.stdout)
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level", "name": "logger"},
        static_fields=static_fields,
    )
    handler.setFormatter(formatter)

    # Replace rather than append so repeated calls don't duplicate output
    root.handlers = [handler]

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler
