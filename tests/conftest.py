# tests/conftest.py
import httpx
import pytest

from reddit_relay.core.auth.models import AccessToken
from reddit_relay.core.auth.provider import TokenProvider


class FakeTokenProvider(TokenProvider):
    def __init__(self, token: AccessToken | None = None):
        self.token = token
        self.calls = 0

    async def ensure_token(self):
        self.calls += 1
        return self.token


@pytest.fixture
def mock_http(monkeypatch):
    """Route every httpx.AsyncClient through a MockTransport handler."""

    def install(handler):
        transport = httpx.MockTransport(handler)
        real_client = httpx.AsyncClient

        monkeypatch.setattr(
            httpx,
            "AsyncClient",
            lambda **kw: real_client(transport=transport, **kw),
        )

    return install


@pytest.fixture
def token_provider():
    return FakeTokenProvider(AccessToken("abc123", expires_in=3600))


@pytest.fixture
def no_token_provider():
    return FakeTokenProvider(None)


def listing_body(*children: dict) -> dict:
    return {"kind": "Listing", "data": {"children": list(children)}}


def child(kind: str, id: str, author: str | None = "someone", **extra) -> dict:
    return {"kind": kind, "data": {"id": id, "author": author, **extra}}


@pytest.fixture
def make_listing():
    return listing_body


@pytest.fixture
def make_child():
    return child
