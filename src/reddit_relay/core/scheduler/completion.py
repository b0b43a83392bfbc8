# reddit_relay/core/scheduler/completion.py
from __future__ import annotations

import asyncio

from reddit_relay.core.errors import CompletionError


class Completion:
    """
    Single-use completion signal handed to every queued task.

    The queue does not start the next task until ``done()`` has been
    called. Calling it twice raises ``CompletionError``.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def signalled(self) -> bool:
        return self._event.is_set()

    def done(self) -> None:
        if self._event.is_set():
            raise CompletionError("Completion already signalled")
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()
