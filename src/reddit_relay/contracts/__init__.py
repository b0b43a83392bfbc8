"""Data contracts shared between the pipeline, dispatcher and workers."""

from reddit_relay.contracts.models import ModelData, ModelRecord, WorkerMessage
from reddit_relay.contracts.worker import Worker

__all__ = [
    "ModelData",
    "ModelRecord",
    "WorkerMessage",
    "Worker",
]
