"""
Sequential task scheduling.

This module provides:
- Completion, a single-use handle a task signals when it is finished
- SequentialTaskQueue, a FIFO running exactly one task at a time
- RateLimitedTaskQueue, the same queue with an adaptive inter-task delay

Example usage:

    queue = RateLimitedTaskQueue(name="api")

    async def fetch(completion):
        try:
            response = await client.get(url)
            queue.set_rate_from_headers(response.headers)
        finally:
            completion.done()

    await queue.push(fetch)
"""

from reddit_relay.core.scheduler.completion import Completion
from reddit_relay.core.scheduler.queue import QueueState, SequentialTaskQueue, Task
from reddit_relay.core.scheduler.rate_limiter import DEFAULT_RATE, RateLimitedTaskQueue

__all__ = [
    "Completion",
    "QueueState",
    "SequentialTaskQueue",
    "Task",
    "DEFAULT_RATE",
    "RateLimitedTaskQueue",
]
