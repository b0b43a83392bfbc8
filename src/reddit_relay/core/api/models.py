# reddit_relay/core/api/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx


@dataclass(frozen=True)
class ApiRequest:
    """
    Description of one upstream call.

    Attributes:
        path: Path joined onto the API base URL (e.g. ``/r/all/new``).
        method: HTTP method.
        url: Absolute URL; takes precedence over ``path`` when set.
        params: Query string parameters.
        data: Form body.
        headers: Extra headers. Authorization and User-Agent are set by
            the pipeline.
    """

    path: str = ""
    method: str = "GET"
    url: str | None = None
    params: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)

    def resolve_url(self, base_url: str) -> str:
        if self.url:
            return self.url
        return f"{base_url.rstrip('/')}/{self.path.lstrip('/')}"


@dataclass
class ApiResult:
    """Outcome of an authenticated request. Never raised, always returned."""

    error: Exception | None = None
    response: httpx.Response | None = None
    body: str | None = None

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and self.response is not None
            and self.response.status_code == 200
        )
