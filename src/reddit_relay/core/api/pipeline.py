# reddit_relay/core/api/pipeline.py
"""
Authenticated request pipeline.

Each request obtains a token, is decorated with the bearer token and the
user agent, and is queued on the rate-limited scheduler. When the queued
task runs it performs the HTTP call, feeds the rate-limit headers back
into the scheduler and hands the outcome to the caller's handler.
"""
from __future__ import annotations

import inspect
import logging
from contextvars import ContextVar
from typing import Any, Awaitable, Callable

import httpx

from reddit_relay.contracts.models import ModelRecord
from reddit_relay.core.api.listing import parse_listing
from reddit_relay.core.api.models import ApiRequest, ApiResult
from reddit_relay.core.auth.provider import TokenProvider
from reddit_relay.core.errors import AuthenticationError, ConfigurationError
from reddit_relay.core.scheduler.completion import Completion
from reddit_relay.core.scheduler.rate_limiter import RateLimitedTaskQueue

logger = logging.getLogger(__name__)


# handler(error, response, body)
ResponseHandler = Callable[
    [Exception | None, httpx.Response | None, str | None],
    Awaitable[None] | None,
]
# handler(records) on success, handler() otherwise
ModelsHandler = Callable[..., Awaitable[None] | None]

# Scheduler whose slot the current context is running in
_running_slot: ContextVar[RateLimitedTaskQueue | None] = ContextVar(
    "reddit_relay_running_slot", default=None
)


class RequestPipeline:
    """
    Example:
        pipeline = RequestPipeline(
            token_provider=provider,
            scheduler=RateLimitedTaskQueue(name="api"),
            user_agent="linux:relay:v0.1 (by /u/someone)",
        )

        records = await pipeline.models(ApiRequest(path="/r/all/new"))
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        scheduler: RateLimitedTaskQueue,
        user_agent: str | None,
        base_url: str = "https://oauth.reddit.com",
        timeout: float = 30.0,
    ) -> None:
        self._token_provider = token_provider
        self._scheduler = scheduler
        self._user_agent = user_agent
        self._base = base_url.rstrip("/")
        self._timeout = timeout

        self._handler_error_count = 0

    @property
    def scheduler(self) -> RateLimitedTaskQueue:
        return self._scheduler

    @property
    def handler_error_count(self) -> int:
        """Total number of caller handlers that raised."""
        return self._handler_error_count

    async def authenticated_request(
        self,
        request: ApiRequest,
        handler: ResponseHandler | None = None,
    ) -> ApiResult:
        """
        Perform ``request`` with a bearer token, through the scheduler.

        Failures are never raised: they are reported via
        ``ApiResult.error`` and to ``handler(error, response, body)``.
        Exceptions raised by ``handler`` are logged and swallowed.

        Called from inside a handler, the request is queued behind the
        current one and the result is returned unfilled; ``handler``
        receives the outcome once the request has run.
        """
        if not self._user_agent:
            logger.error("No user agent configured, refusing to send request")
            result = ApiResult(error=ConfigurationError("user agent is not configured"))
            await self._invoke(handler, result.error, None, None)
            return result

        token = await self._token_provider.ensure_token()
        if token is None:
            logger.warning("No access token available for %s %s", request.method, request.path)
            result = ApiResult(error=AuthenticationError("no access token available"))
            await self._invoke(handler, result.error, None, None)
            return result

        headers = {
            **request.headers,
            "Authorization": f"bearer {token.token_value}",
            "User-Agent": self._user_agent,
        }
        result = ApiResult()

        async def task(completion: Completion) -> None:
            slot = _running_slot.set(self._scheduler)
            try:
                try:
                    async with httpx.AsyncClient(timeout=self._timeout) as client:
                        r = await client.request(
                            request.method,
                            request.resolve_url(self._base),
                            params=request.params or None,
                            data=request.data,
                            headers=headers,
                        )
                except httpx.HTTPError as exc:
                    logger.warning(
                        "Request %s %s failed: %s",
                        request.method,
                        request.path or request.url,
                        exc,
                    )
                    result.error = exc
                except Exception as exc:
                    logger.error(
                        "Request %s %s raised: %s",
                        request.method,
                        request.path or request.url,
                        exc,
                        exc_info=True,
                    )
                    result.error = exc
                else:
                    result.response = r
                    result.body = r.text
                    self._scheduler.set_rate_from_headers(r.headers)
                    if r.status_code != 200:
                        logger.info(
                            "Request %s %s returned %d",
                            request.method,
                            request.path or request.url,
                            r.status_code,
                        )

                await self._invoke(handler, result.error, result.response, result.body)
            finally:
                _running_slot.reset(slot)
                completion.done()

        finished = self._scheduler.push(task)
        if _running_slot.get() is self._scheduler:
            # Awaiting here would wait on the slot we are running in
            logger.debug(
                "Queued %s %s from inside a running request",
                request.method,
                request.path or request.url,
            )
            return result

        await finished
        return result

    async def models(
        self,
        request: ApiRequest,
        handler: ModelsHandler | None = None,
    ) -> list[ModelRecord] | None:
        """
        Fetch a listing and return its children sorted oldest first.

        Returns None (and calls ``handler()`` with no argument) on a
        non-200 status, a transport error or a body without
        ``data.children``. Called from inside a handler it returns None
        straight away and ``handler`` gets the records later.
        """
        records: list[ModelRecord] | None = None

        def on_response(
            error: Exception | None,
            response: httpx.Response | None,
            body: str | None,
        ) -> Awaitable[None] | None:
            nonlocal records
            if error is None and response is not None and response.status_code == 200:
                records = parse_listing(body)

            if handler is None:
                return None
            if records is None:
                return handler()
            return handler(records)

        await self.authenticated_request(request, on_response)
        return records

    async def _invoke(self, handler: Callable[..., Any] | None, *args: Any) -> None:
        if handler is None:
            return
        try:
            outcome = handler(*args)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as exc:
            self._handler_error_count += 1
            logger.error("Response handler failed: %s", exc, exc_info=True)
