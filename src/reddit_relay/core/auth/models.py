# reddit_relay/core/auth/models.py
from dataclasses import dataclass, field
import time


@dataclass(frozen=True)
class AccessToken:
    token_value: str
    expires_in: int
    issued_at: float = field(default_factory=time.time)

    @property
    def expires_at(self) -> float:
        return self.issued_at + self.expires_in

    def has_expired(self, margin: float = 0.0, now: float | None = None) -> bool:
        """
        Returns True once the token should no longer be used.
        `margin` treats the token as expired early so in-flight requests
        don't race the real expiry.
        """
        if now is None:
            now = time.time()
        return now >= self.expires_at - margin
