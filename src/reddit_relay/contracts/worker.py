# reddit_relay/contracts/worker.py
"""
Worker contract.

A worker is any consumer that accepts routed messages. How the message
reaches the consumer (in-memory queue, pipe, socket) is up to the
implementation.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from reddit_relay.contracts.models import WorkerMessage


@runtime_checkable
class Worker(Protocol):
    """Protocol for message consumers registered with the dispatcher."""

    def send(self, message: WorkerMessage) -> None:
        """
        Deliver one message.

        Must not block: the dispatcher calls every worker in turn from
        its own queue slot.
        """
        ...
