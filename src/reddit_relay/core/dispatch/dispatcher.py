# reddit_relay/core/dispatch/dispatcher.py
"""
Model dispatcher for broadcasting records to workers.

Records are taken one at a time from the dispatcher's own queue. Every
eligible record goes to every registered worker; workers filter what
they consume.
"""
from __future__ import annotations

import asyncio
import logging

from reddit_relay.contracts.models import ModelRecord, WorkerMessage
from reddit_relay.core.dispatch.registry import WorkerRegistry
from reddit_relay.core.dispatch.routing import RoutingConfig
from reddit_relay.core.scheduler.completion import Completion
from reddit_relay.core.scheduler.rate_limiter import RateLimitedTaskQueue

logger = logging.getLogger(__name__)


class ModelDispatcher:
    """
    Broadcasts model records to all registered workers.

    Features:
    - Deleted/removed records are dropped
    - Record kind selects the channel; unknown kinds are dropped
    - Error isolation (one worker failure doesn't affect others)

    Example:
        dispatcher = ModelDispatcher(registry=workers)

        for record in records:
            dispatcher.dispatch(record)
    """

    def __init__(
        self,
        registry: WorkerRegistry,
        routing: RoutingConfig | None = None,
        queue: RateLimitedTaskQueue | None = None,
    ) -> None:
        self._registry = registry
        self._routing = routing or RoutingConfig()
        self._queue = queue or RateLimitedTaskQueue(name="dispatch", rate=1000.0)

        self._dispatch_count = 0
        self._dropped_count = 0
        self._error_count = 0

    @property
    def registry(self) -> WorkerRegistry:
        return self._registry

    @property
    def queue(self) -> RateLimitedTaskQueue:
        return self._queue

    @property
    def dispatch_count(self) -> int:
        """Total number of records broadcast."""
        return self._dispatch_count

    @property
    def dropped_count(self) -> int:
        """Total number of records filtered out."""
        return self._dropped_count

    @property
    def error_count(self) -> int:
        """Total number of worker send failures."""
        return self._error_count

    def dispatch(self, model: ModelRecord) -> asyncio.Future[None]:
        """
        Queue a record for broadcast.

        Returns:
            A future resolved once the broadcast has run.
        """

        def task(completion: Completion) -> None:
            try:
                self.broadcast(model)
            finally:
                completion.done()

        return self._queue.push(task)

    def broadcast(self, model: ModelRecord) -> int:
        """
        Send a record to every registered worker.

        Returns:
            Number of workers that accepted the message.
        """
        if self._routing.is_deleted(model):
            self._dropped_count += 1
            logger.debug("Dropping %s by deleted author", model.fullname)
            return 0

        channel = self._routing.channel_for(model)
        if channel is None:
            self._dropped_count += 1
            logger.debug("No channel for kind '%s', dropping %s", model.kind, model.fullname)
            return 0

        message = WorkerMessage(channel=channel, model=model)
        self._dispatch_count += 1

        delivered = 0
        for name, worker in self._registry.items():
            try:
                worker.send(message)
                delivered += 1
            except Exception as exc:
                self._error_count += 1
                logger.error(
                    "Worker '%s' failed to accept %s on '%s': %s",
                    name,
                    model.fullname,
                    channel,
                    exc,
                    exc_info=True,
                )

        logger.debug("Broadcast %s on '%s' to %d worker(s)", model.fullname, channel, delivered)
        return delivered

    async def join(self) -> None:
        """Wait until every queued record has been broadcast."""
        await self._queue.join()

    def reset_counters(self) -> None:
        """Reset dispatch, drop and error counters."""
        self._dispatch_count = 0
        self._dropped_count = 0
        self._error_count = 0
