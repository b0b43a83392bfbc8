"""Access token acquisition and caching."""

from reddit_relay.core.auth.models import AccessToken
from reddit_relay.core.auth.provider import TokenProvider
from reddit_relay.core.auth.password_grant import PasswordGrantTokenProvider

__all__ = [
    "AccessToken",
    "TokenProvider",
    "PasswordGrantTokenProvider",
]
