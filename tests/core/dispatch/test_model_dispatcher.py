# tests/core/dispatch/test_model_dispatcher.py
import asyncio

import pytest

from reddit_relay.contracts.models import ModelRecord, WorkerMessage
from reddit_relay.core.dispatch.dispatcher import ModelDispatcher
from reddit_relay.core.dispatch.registry import WorkerRegistry
from reddit_relay.core.dispatch.routing import RoutingConfig
from reddit_relay.core.dispatch.workers import QueueWorker


class RecordingWorker:
    def __init__(self):
        self.messages: list[WorkerMessage] = []

    def send(self, message):
        self.messages.append(message)


class FailingWorker:
    def send(self, message):
        raise RuntimeError("worker down")


def record(kind="t1", id="a1", author="someone", **extra) -> ModelRecord:
    return ModelRecord.model_validate(
        {"kind": kind, "data": {"id": id, "author": author, **extra}}
    )


@pytest.fixture
def registry():
    return WorkerRegistry()


class TestBroadcast:
    def test_comment_goes_to_comments_channel(self, registry):
        worker = RecordingWorker()
        registry.add("w", worker)
        dispatcher = ModelDispatcher(registry)

        delivered = dispatcher.broadcast(record("t1", body="hi"))

        assert delivered == 1
        (message,) = worker.messages
        assert message.channel == "comments"
        assert message.model.fullname == "t1_a1"
        assert message.to_dict()["model"]["data"]["body"] == "hi"
        assert dispatcher.dispatch_count == 1

    def test_post_goes_to_posts_channel(self, registry):
        worker = RecordingWorker()
        registry.add("w", worker)

        ModelDispatcher(registry).broadcast(record("t3"))

        assert worker.messages[0].channel == "posts"

    def test_every_worker_receives_every_record(self, registry):
        workers = [RecordingWorker() for _ in range(3)]
        for i, w in enumerate(workers):
            registry.add(f"w{i}", w)

        assert ModelDispatcher(registry).broadcast(record()) == 3
        assert all(len(w.messages) == 1 for w in workers)

    @pytest.mark.parametrize("author", ["[deleted]", "[removed]", "[DELETED]"])
    def test_deleted_author_is_dropped(self, registry, author):
        worker = RecordingWorker()
        registry.add("w", worker)
        dispatcher = ModelDispatcher(registry)

        assert dispatcher.broadcast(record(author=author)) == 0
        assert worker.messages == []
        assert dispatcher.dropped_count == 1
        assert dispatcher.dispatch_count == 0

    def test_unknown_kind_is_dropped(self, registry):
        worker = RecordingWorker()
        registry.add("w", worker)
        dispatcher = ModelDispatcher(registry)

        assert dispatcher.broadcast(record("t5")) == 0
        assert worker.messages == []
        assert dispatcher.dropped_count == 1

    def test_custom_routing(self, registry):
        worker = RecordingWorker()
        registry.add("w", worker)
        dispatcher = ModelDispatcher(
            registry,
            routing=RoutingConfig(channels={"t5": "subreddits"}, deleted_authors=frozenset()),
        )

        dispatcher.broadcast(record("t5"))
        dispatcher.broadcast(record("t1", author="[deleted]"))

        assert [m.channel for m in worker.messages] == ["subreddits"]
        assert dispatcher.dropped_count == 1

    def test_failing_worker_is_isolated(self, registry):
        before, after = RecordingWorker(), RecordingWorker()
        registry.add("before", before)
        registry.add("broken", FailingWorker())
        registry.add("after", after)
        dispatcher = ModelDispatcher(registry)

        delivered = dispatcher.broadcast(record())

        assert delivered == 2
        assert len(before.messages) == 1
        assert len(after.messages) == 1
        assert dispatcher.error_count == 1

    def test_no_workers(self, registry):
        dispatcher = ModelDispatcher(registry)

        assert dispatcher.broadcast(record()) == 0
        assert dispatcher.dispatch_count == 1

    def test_reset_counters(self, registry):
        registry.add("broken", FailingWorker())
        dispatcher = ModelDispatcher(registry)
        dispatcher.broadcast(record())
        dispatcher.broadcast(record(author="[removed]"))

        dispatcher.reset_counters()

        assert (dispatcher.dispatch_count, dispatcher.dropped_count, dispatcher.error_count) == (0, 0, 0)


class TestQueuedDispatch:
    @pytest.mark.asyncio
    async def test_records_delivered_in_order(self, registry):
        worker = QueueWorker()
        registry.add("q", worker)
        dispatcher = ModelDispatcher(registry)

        for id in ("a", "b", "c"):
            dispatcher.dispatch(record(id=id))
        await dispatcher.join()

        received = []
        while not worker.queue.empty():
            received.append(worker.queue.get_nowait().model.id)
        assert received == ["a", "b", "c"]
        assert dispatcher.queue.processed_count == 3

    @pytest.mark.asyncio
    async def test_dispatch_future_resolves_after_broadcast(self, registry):
        worker = RecordingWorker()
        registry.add("w", worker)
        dispatcher = ModelDispatcher(registry)

        await dispatcher.dispatch(record())

        assert len(worker.messages) == 1

    @pytest.mark.asyncio
    async def test_registry_read_at_dispatch_time(self, registry):
        first, second = RecordingWorker(), RecordingWorker()
        registry.add("first", first)
        dispatcher = ModelDispatcher(registry)

        await dispatcher.dispatch(record(id="a"))
        registry.add("second", second)
        registry.remove("first")
        await dispatcher.dispatch(record(id="b"))

        assert [m.model.id for m in first.messages] == ["a"]
        assert [m.model.id for m in second.messages] == ["b"]

    @pytest.mark.asyncio
    async def test_failing_worker_does_not_stall_queue(self, registry):
        worker = RecordingWorker()
        registry.add("broken", FailingWorker())
        registry.add("ok", worker)
        dispatcher = ModelDispatcher(registry)

        await asyncio.wait_for(
            asyncio.gather(*(dispatcher.dispatch(record(id=i)) for i in ("a", "b"))),
            timeout=1.0,
        )

        assert len(worker.messages) == 2
        assert dispatcher.error_count == 2

    @pytest.mark.asyncio
    async def test_channel_filtered_queue_worker(self, registry):
        posts = QueueWorker(channels={"posts"})
        registry.add("posts", posts)
        dispatcher = ModelDispatcher(registry)

        dispatcher.dispatch(record("t1", id="a"))
        dispatcher.dispatch(record("t3", id="b"))
        await dispatcher.join()

        assert posts.queue.qsize() == 1
        assert posts.queue.get_nowait().model.id == "b"
