# reddit_relay/core/auth/provider.py
from abc import ABC, abstractmethod

from reddit_relay.core.auth.models import AccessToken


class TokenProvider(ABC):
    @abstractmethod
    async def ensure_token(self) -> AccessToken | None:
        """
        Return a usable access token, or None if one cannot be obtained.
        Implementations must re-authenticate when the cached token has
        expired and must not raise on authentication failure.
        """
        ...
