# reddit_relay/core/dispatch/registry.py
"""
Worker registry – the live set of consumers records are broadcast to.
"""
from __future__ import annotations

import logging
from typing import Iterator

from reddit_relay.contracts.worker import Worker

logger = logging.getLogger(__name__)


class WorkerRegistry:
    """Named registry of active workers. Read fresh at every dispatch."""

    def __init__(self) -> None:
        self._workers: dict[str, Worker] = {}

    def add(self, name: str, worker: Worker) -> None:
        if name in self._workers:
            raise ValueError(f"Worker '{name}' already registered")
        self._workers[name] = worker
        logger.info("Registered worker: %s (%s)", name, type(worker).__name__)

    def remove(self, name: str) -> Worker:
        try:
            worker = self._workers.pop(name)
        except KeyError:
            raise KeyError(f"Worker '{name}' not found. Available: {list(self._workers)}")
        logger.info("Removed worker: %s", name)
        return worker

    def get(self, name: str) -> Worker:
        try:
            return self._workers[name]
        except KeyError:
            raise KeyError(f"Worker '{name}' not found. Available: {list(self._workers)}")

    def has(self, name: str) -> bool:
        return name in self._workers

    def list(self) -> list[str]:
        return list(self._workers.keys())

    def items(self) -> list[tuple[str, Worker]]:
        # Copy so workers may leave while a broadcast is iterating
        return list(self._workers.items())

    def __iter__(self) -> Iterator[Worker]:
        return iter(list(self._workers.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._workers

    def __len__(self) -> int:
        return len(self._workers)
