"""
Fan-out of model records to registered workers.

This module provides:
- WorkerRegistry for the set of active consumers
- RoutingConfig for the kind -> channel table and deleted-author filter
- ModelDispatcher for queued, broadcast delivery
- QueueWorker / LoggingWorker transports
"""

from reddit_relay.core.dispatch.registry import WorkerRegistry
from reddit_relay.core.dispatch.routing import RoutingConfig, load_routing_config
from reddit_relay.core.dispatch.dispatcher import ModelDispatcher
from reddit_relay.core.dispatch.workers import LoggingWorker, QueueWorker

__all__ = [
    "WorkerRegistry",
    "RoutingConfig",
    "load_routing_config",
    "ModelDispatcher",
    "LoggingWorker",
    "QueueWorker",
]
