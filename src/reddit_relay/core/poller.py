# reddit_relay/core/poller.py
"""
Listing poller – feeds newly seen records into the dispatcher.
"""
from __future__ import annotations

import asyncio
import logging

from reddit_relay.core.api.models import ApiRequest
from reddit_relay.core.api.pipeline import RequestPipeline
from reddit_relay.core.dispatch.dispatcher import ModelDispatcher

logger = logging.getLogger(__name__)


class ListingPoller:
    """
    Repeatedly fetches one listing path and dispatches unseen records.

    Records are dispatched oldest first. A record counts as seen once its
    numeric id is at or below the highest id this poller dispatched.
    """

    def __init__(
        self,
        pipeline: RequestPipeline,
        dispatcher: ModelDispatcher,
        *,
        path: str,
        limit: int = 100,
        interval: float = 2.0,
    ) -> None:
        self._pipeline = pipeline
        self._dispatcher = dispatcher
        self._path = path
        self._limit = limit
        self._interval = interval
        self._last_seen: int | None = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def last_seen(self) -> int | None:
        return self._last_seen

    async def poll_once(self) -> int:
        """
        Fetch the listing once.

        Returns:
            Number of records handed to the dispatcher.
        """
        records = await self._pipeline.models(
            ApiRequest(path=self._path, params={"limit": self._limit, "raw_json": 1})
        )
        if not records:
            return 0

        fresh = [
            r for r in records
            if self._last_seen is None or r.numeric_id > self._last_seen
        ]
        for record in fresh:
            self._dispatcher.dispatch(record)

        if fresh:
            self._last_seen = fresh[-1].numeric_id
            logger.debug("Dispatched %d new record(s) from %s", len(fresh), self._path)

        return len(fresh)

    async def run(self, stop: asyncio.Event) -> None:
        logger.info("Polling %s every %.1fs", self._path, self._interval)
        while not stop.is_set():
            try:
                await self.poll_once()
            except Exception as exc:
                logger.error("Poll of %s failed: %s", self._path, exc, exc_info=True)

            try:
                await asyncio.wait_for(stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Stopped polling %s", self._path)
