# reddit_relay/core/scheduler/queue.py
"""
FIFO task queue with exactly one task in flight.

Tasks are callables taking a ``Completion``. They may be plain functions
or coroutine functions; either way the queue waits for the completion to
be signalled before starting the next task.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from reddit_relay.core.scheduler.completion import Completion

logger = logging.getLogger(__name__)


Task = Callable[[Completion], Awaitable[None] | None]


class QueueState(str, Enum):
    IDLE = "idle"
    DELAYING = "delaying"
    RUNNING = "running"
    DRAINED = "drained"


@dataclass
class _QueuedTask:
    task: Task
    finished: asyncio.Future[None]


class SequentialTaskQueue:
    """
    Runs pushed tasks one at a time, strictly in push order.

    Subclasses hook into ``_before_dispatch`` to delay the next task.

    Example:
        queue = SequentialTaskQueue(name="models")

        def work(completion):
            do_something()
            completion.done()

        await queue.push(work)
    """

    def __init__(self, name: str = "tasks") -> None:
        self._name = name
        self._pending: deque[_QueuedTask] = deque()
        self._worker: asyncio.Task | None = None
        self._state = QueueState.IDLE

        self._processed_count = 0
        self._error_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> QueueState:
        return self._state

    @property
    def pending(self) -> int:
        """Number of tasks waiting to start."""
        return len(self._pending)

    @property
    def processed_count(self) -> int:
        """Total number of tasks that reached completion."""
        return self._processed_count

    @property
    def error_count(self) -> int:
        """Total number of tasks that raised."""
        return self._error_count

    def push(self, task: Task) -> asyncio.Future[None]:
        """
        Append a task to the queue.

        Starts processing if the queue was idle. Must be called from a
        running event loop.

        Returns:
            A future resolved once the task's completion is signalled.
        """
        loop = asyncio.get_running_loop()
        queued = _QueuedTask(task=task, finished=loop.create_future())
        self._pending.append(queued)

        if self._worker is None or self._worker.done():
            self._worker = loop.create_task(
                self._drain(),
                name=f"{self._name}-queue",
            )

        logger.debug("Queued task on '%s' (%d pending)", self._name, len(self._pending))
        return queued.finished

    async def join(self) -> None:
        """Wait until every pushed task has completed."""
        while self._worker is not None and not self._worker.done():
            await asyncio.shield(self._worker)

    async def _drain(self) -> None:
        while self._pending:
            queued = self._pending.popleft()
            await self._process(queued)
        self._state = QueueState.DRAINED

    async def _process(self, queued: _QueuedTask) -> None:
        await self._before_dispatch()

        self._state = QueueState.RUNNING
        completion = Completion()

        try:
            outcome = queued.task(completion)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as exc:
            self._error_count += 1
            logger.error(
                "Task failed on queue '%s': %s",
                self._name,
                exc,
                exc_info=True,
            )
            if not completion.signalled:
                completion.done()

        await completion.wait()

        self._processed_count += 1
        if not queued.finished.done():
            queued.finished.set_result(None)
        self._state = QueueState.IDLE

    async def _before_dispatch(self) -> None:
        """Called before each task starts. No delay by default."""
        return None
