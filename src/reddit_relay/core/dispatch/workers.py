# reddit_relay/core/dispatch/workers.py
"""
In-process worker transports.
"""
from __future__ import annotations

import asyncio
import logging

from reddit_relay.contracts.models import WorkerMessage

logger = logging.getLogger(__name__)


class QueueWorker:
    """
    Delivers messages into an ``asyncio.Queue`` for a consumer coroutine.

    Optionally only accepts messages for the given channels.
    """

    def __init__(
        self,
        queue: asyncio.Queue[WorkerMessage] | None = None,
        channels: set[str] | None = None,
    ) -> None:
        self.queue: asyncio.Queue[WorkerMessage] = queue if queue is not None else asyncio.Queue()
        self._channels = channels

    def send(self, message: WorkerMessage) -> None:
        if self._channels is not None and message.channel not in self._channels:
            return
        self.queue.put_nowait(message)


class LoggingWorker:
    """Logs every message it receives."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    def send(self, message: WorkerMessage) -> None:
        logger.log(
            self._level,
            "Received %s",
            message.model.fullname,
            extra={"channel": message.channel, "author": message.model.author},
        )
