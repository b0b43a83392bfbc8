# reddit_relay/main.py
"""
Relay runtime factory.

Wires the token provider, the rate-limited request queue, the request
pipeline and the model dispatcher, then polls the configured listings
until interrupted.
"""
from __future__ import annotations

import asyncio
import logging
import signal
from dataclasses import dataclass, field

from reddit_relay.core.api.pipeline import RequestPipeline
from reddit_relay.core.auth.password_grant import PasswordGrantTokenProvider
from reddit_relay.core.config import Settings, settings
from reddit_relay.core.dispatch.dispatcher import ModelDispatcher
from reddit_relay.core.dispatch.registry import WorkerRegistry
from reddit_relay.core.dispatch.routing import load_routing_config
from reddit_relay.core.dispatch.workers import LoggingWorker
from reddit_relay.core.logging import configure_logging
from reddit_relay.core.poller import ListingPoller
from reddit_relay.core.scheduler.rate_limiter import RateLimitedTaskQueue

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    token_provider: PasswordGrantTokenProvider
    pipeline: RequestPipeline
    workers: WorkerRegistry
    dispatcher: ModelDispatcher
    pollers: list[ListingPoller] = field(default_factory=list)


def build_runtime(cfg: Settings) -> Runtime:
    """Build the object graph for ``cfg``. No I/O happens here."""
    credentials = cfg.credentials()
    missing = credentials.missing()
    if missing:
        logger.warning("Missing credentials, every request will come back empty: %s", missing)

    token_provider = PasswordGrantTokenProvider(
        token_url=cfg.reddit_token_url,
        credentials=credentials,
        timeout=cfg.request_timeout,
        expiry_margin=cfg.token_expiry_margin,
    )

    pipeline = RequestPipeline(
        token_provider=token_provider,
        scheduler=RateLimitedTaskQueue(
            name="requests",
            floor_interval=cfg.rate_floor_interval,
        ),
        user_agent=credentials.user_agent,
        base_url=cfg.reddit_api_base_url,
        timeout=cfg.request_timeout,
    )

    workers = WorkerRegistry()
    dispatcher = ModelDispatcher(
        registry=workers,
        routing=load_routing_config(cfg.routing_config_paths),
        queue=RateLimitedTaskQueue(name="dispatch", rate=cfg.dispatch_rate),
    )

    pollers = [
        ListingPoller(
            pipeline,
            dispatcher,
            path=path,
            limit=cfg.poll_limit,
            interval=cfg.poll_interval,
        )
        for path in cfg.poll_paths
    ]

    return Runtime(
        token_provider=token_provider,
        pipeline=pipeline,
        workers=workers,
        dispatcher=dispatcher,
        pollers=pollers,
    )


async def run(runtime: Runtime, stop: asyncio.Event) -> None:
    logger.info("Starting %d poller(s)", len(runtime.pollers))
    await asyncio.gather(*(p.run(stop) for p in runtime.pollers))
    await runtime.dispatcher.join()
    logger.info(
        "Relay stopped",
        extra={
            "dispatched": runtime.dispatcher.dispatch_count,
            "dropped": runtime.dispatcher.dropped_count,
            "tokens_issued": runtime.token_provider.tokens_issued,
        },
    )


async def _serve(cfg: Settings) -> None:
    runtime = build_runtime(cfg)
    runtime.workers.add("log", LoggingWorker())

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows event loops have no signal handlers
            pass

    await run(runtime, stop)


def main() -> None:
    configure_logging(settings.log_level, app_env=settings.app_env)
    asyncio.run(_serve(settings))
