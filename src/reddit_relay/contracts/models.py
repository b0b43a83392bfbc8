# reddit_relay/contracts/models.py
"""
Model records parsed from listing responses, and the message shape
broadcast to workers.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class ModelData(BaseModel):
    """
    Payload of a listing child.

    Only ``id`` and ``author`` are interpreted; every other field the API
    returns is kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    author: str | None = None

    @field_validator("id")
    @classmethod
    def _check_base36(cls, value: str) -> str:
        try:
            int(value, 36)
        except ValueError:
            raise ValueError(f"id '{value}' is not a base-36 identifier") from None
        return value


class ModelRecord(BaseModel):
    """A parsed API entity (comment, link, ...)."""

    kind: str
    data: ModelData

    @property
    def id(self) -> str:
        return self.data.id

    @property
    def author(self) -> str | None:
        return self.data.author

    @property
    def numeric_id(self) -> int:
        return int(self.data.id, 36)

    @property
    def fullname(self) -> str:
        return f"{self.kind}_{self.data.id}"


@dataclass(frozen=True)
class WorkerMessage:
    """
    A record routed to a channel.

    Attributes:
        channel: Routing bucket derived from the record kind.
        model: The record itself.
    """

    channel: str
    model: ModelRecord

    def to_dict(self) -> dict[str, Any]:
        return {"channel": self.channel, "model": self.model.model_dump()}
