# reddit_relay/core/scheduler/rate_limiter.py
"""
Sequential queue with an adaptive inter-task delay.

The rate is learned from the server's rate-limit headers after every
request. While the allowance is at most one request per second, tasks are
spaced at least ``floor_interval`` apart; above that, no delay is added.
"""
from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Awaitable, Callable, Mapping

from reddit_relay.core.scheduler.queue import QueueState, SequentialTaskQueue

logger = logging.getLogger(__name__)

DEFAULT_RATE = 1.0

REMAINING_HEADER = "x-ratelimit-remaining"
RESET_HEADER = "x-ratelimit-reset"


class RateLimitedTaskQueue(SequentialTaskQueue):
    """
    One-at-a-time task queue throttled toward a one-per-interval floor.

    Args:
        name: Queue name used in logs.
        rate: Initial allowance in tasks per second.
        floor_interval: Minimum spacing in seconds while rate <= 1.
        clock: Monotonic clock, injectable for tests.
        sleep: Coroutine used to wait out the delay, injectable for tests.
    """

    def __init__(
        self,
        name: str = "requests",
        *,
        rate: float = DEFAULT_RATE,
        floor_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(name)
        self._rate = rate if rate > 0 else DEFAULT_RATE
        self._floor_interval = floor_interval
        self._clock = clock
        self._sleep = sleep
        self._last_dispatch: float | None = None

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def last_dispatch(self) -> float | None:
        return self._last_dispatch

    def get_delay(self) -> float:
        """Seconds to wait before the next task may start."""
        if self._rate > 1 or self._last_dispatch is None:
            return 0.0
        elapsed = self._clock() - self._last_dispatch
        return max(0.0, self._floor_interval - elapsed)

    def set_rate(self, remaining: float, seconds_to_reset: float) -> None:
        if seconds_to_reset > 0:
            rate = remaining / seconds_to_reset
        else:
            rate = DEFAULT_RATE

        if rate <= 0:
            rate = DEFAULT_RATE

        self._rate = rate
        logger.debug(
            "Queue '%s' rate set to %.3f/s (remaining=%s, reset=%ss)",
            self._name,
            rate,
            remaining,
            seconds_to_reset,
        )

    def set_rate_from_headers(self, headers: Mapping[str, str]) -> None:
        """
        Update the rate from rate-limit response headers.

        A missing or unparsable remaining-allowance header leaves the
        current rate in effect.
        """
        try:
            remaining = float(headers[REMAINING_HEADER])
        except (KeyError, TypeError, ValueError):
            return
        if not math.isfinite(remaining):
            return

        try:
            reset = float(headers[RESET_HEADER])
        except (KeyError, TypeError, ValueError):
            reset = 0.0

        self.set_rate(remaining, reset)

    async def _before_dispatch(self) -> None:
        delay = self.get_delay()
        if delay > 0:
            self._state = QueueState.DELAYING
            logger.debug("Queue '%s' delaying next task by %.3fs", self._name, delay)
            await self._sleep(delay)
        self._last_dispatch = self._clock()
