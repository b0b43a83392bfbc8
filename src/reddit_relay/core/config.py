# reddit_relay/core/config.py
"""
Central configuration for the relay runtime.

Environment variables (and an optional ``.env`` file) override defaults.
Credentials are not required at import time; components that need them
receive an explicit ``ApiCredentials`` and treat missing values as a
configuration error.
"""
from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class ApiCredentials:
    """Script-app credentials for the password grant."""

    client_id: str = ""
    client_secret: str = ""
    username: str = ""
    password: str = ""
    user_agent: str = ""

    def missing(self) -> list[str]:
        """Names of the credential fields that are empty."""
        return [
            name
            for name in ("client_id", "client_secret", "username", "password", "user_agent")
            if not getattr(self, name)
        ]


class Settings(BaseSettings):
    """Environment-driven settings with sensible defaults."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    # Reddit script-app credentials
    reddit_client_id: str = Field(default="", description="OAuth client id")
    reddit_client_secret: str = Field(default="", description="OAuth client secret")
    reddit_username: str = Field(default="", description="Resource owner username")
    reddit_password: str = Field(default="", description="Resource owner password")
    reddit_user_agent: str = Field(
        default="",
        description="User-Agent sent with every request (required by the API)",
    )

    reddit_token_url: str = "https://www.reddit.com/api/v1/access_token"
    reddit_api_base_url: str = "https://oauth.reddit.com"

    request_timeout: float = 30.0
    token_expiry_margin: float = Field(
        default=10.0,
        description="Seconds before expiry at which a token is renewed",
    )

    # Scheduling
    rate_floor_interval: float = Field(
        default=1.0,
        description="Minimum seconds between requests while rate <= 1/s",
    )
    dispatch_rate: float = Field(
        default=1000.0,
        description="Initial rate of the model dispatch queue",
    )

    # Routing config file paths (glob patterns)
    routing_config_paths: list[str] = Field(
        default_factory=lambda: ["config/routing.yaml"]
    )

    # Polling
    poll_paths: list[str] = Field(
        default_factory=lambda: ["/r/all/comments", "/r/all/new"]
    )
    poll_limit: int = 100
    poll_interval: float = 2.0

    def credentials(self) -> ApiCredentials:
        return ApiCredentials(
            client_id=self.reddit_client_id,
            client_secret=self.reddit_client_secret,
            username=self.reddit_username,
            password=self.reddit_password,
            user_agent=self.reddit_user_agent,
        )


settings = Settings()
