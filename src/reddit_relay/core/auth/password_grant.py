# reddit_relay/core/auth/password_grant.py
import asyncio
import logging
import time
from typing import Callable

import httpx
from pydantic import BaseModel, ValidationError

from reddit_relay.core.auth.models import AccessToken
from reddit_relay.core.auth.provider import TokenProvider
from reddit_relay.core.config import ApiCredentials

logger = logging.getLogger(__name__)


class TokenResponse(BaseModel):
    access_token: str
    expires_in: int


class PasswordGrantTokenProvider(TokenProvider):
    """
    OAuth2 password grant for script apps.

    The client id/secret go in HTTP basic auth, the resource owner's
    username/password in the form body. A failed grant leaves the cached
    token untouched and yields None; the next call tries again.
    """

    def __init__(
        self,
        *,
        token_url: str,
        credentials: ApiCredentials,
        timeout: float = 10.0,
        expiry_margin: float = 10.0,
        on_token: Callable[[AccessToken], None] | None = None,
    ):
        self._token_url = token_url
        self._credentials = credentials
        self._timeout = timeout
        self._expiry_margin = expiry_margin
        self._on_token = on_token

        self._token: AccessToken | None = None
        self._lock = asyncio.Lock()
        self._tokens_issued = 0

    @property
    def token(self) -> AccessToken | None:
        return self._token

    @property
    def tokens_issued(self) -> int:
        """Number of tokens minted by this provider."""
        return self._tokens_issued

    def _usable(self, token: AccessToken | None) -> bool:
        if token is None:
            return False
        # Short-lived tokens get at least half their lifetime
        margin = min(self._expiry_margin, token.expires_in / 2)
        return not token.has_expired(margin)

    async def ensure_token(self) -> AccessToken | None:
        if self._usable(self._token):
            return self._token

        async with self._lock:
            # Another caller may have renewed while we waited
            if self._usable(self._token):
                return self._token
            return await self._authenticate()

    async def _authenticate(self) -> AccessToken | None:
        missing = self._credentials.missing()
        if missing:
            logger.error("Cannot authenticate, missing credentials: %s", missing)
            return None

        creds = self._credentials
        logger.info(
            "Requesting access token",
            extra={"token_url": self._token_url, "username": creds.username},
        )

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                r = await client.post(
                    self._token_url,
                    auth=(creds.client_id, creds.client_secret),
                    data={
                        "grant_type": "password",
                        "username": creds.username,
                        "password": creds.password,
                    },
                    headers={"User-Agent": creds.user_agent},
                )
        except httpx.HTTPError as exc:
            logger.warning("Token request failed: %s", exc)
            return None

        if r.status_code != 200:
            logger.warning(
                "Token request rejected",
                extra={"status_code": r.status_code},
            )
            return None

        try:
            payload = TokenResponse.model_validate_json(r.content)
        except ValidationError as exc:
            logger.warning("Unexpected token response: %s", exc.errors()[0]["msg"])
            return None

        self._token = AccessToken(
            token_value=payload.access_token,
            expires_in=payload.expires_in,
            issued_at=time.time(),
        )
        self._tokens_issued += 1

        logger.info(
            "Access token created",
            extra={"expires_in": payload.expires_in, "tokens_issued": self._tokens_issued},
        )
        if self._on_token is not None:
            try:
                self._on_token(self._token)
            except Exception as exc:
                logger.error("Token callback failed: %s", exc, exc_info=True)

        return self._token
