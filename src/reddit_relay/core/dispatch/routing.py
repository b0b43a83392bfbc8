# reddit_relay/core/dispatch/routing.py
"""
Routing rules for the dispatcher.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from reddit_relay.contracts.models import ModelRecord
from reddit_relay.core.loader import load_yaml_files, substitute_env_vars

logger = logging.getLogger(__name__)

DEFAULT_CHANNELS = {
    "t1": "comments",
    "t3": "posts",
}
DEFAULT_DELETED_AUTHORS = frozenset({"[deleted]", "[removed]"})


@dataclass(frozen=True)
class RoutingConfig:
    """
    Attributes:
        channels: Record kind -> channel name.
        deleted_authors: Author sentinels (lower case) marking removed records.
    """

    channels: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CHANNELS))
    deleted_authors: frozenset[str] = DEFAULT_DELETED_AUTHORS

    def channel_for(self, model: ModelRecord) -> str | None:
        return self.channels.get(model.kind)

    def is_deleted(self, model: ModelRecord) -> bool:
        author = model.author
        return author is not None and author.lower() in self.deleted_authors


def load_routing_config(patterns: Iterable[str]) -> RoutingConfig:
    """
    Load routing rules from YAML files.

    Expected YAML structure:
    ```yaml
    routing:
      channels:
        t1: comments
        t3: posts
      deleted_authors:
        - "[deleted]"
        - "[removed]"
    ```

    Channels from later files are merged over earlier ones; a later
    ``deleted_authors`` list replaces the earlier one. Without any file
    the defaults apply.

    Raises:
        ValueError: If a section has the wrong shape or env vars are missing
    """
    channels = dict(DEFAULT_CHANNELS)
    deleted = set(DEFAULT_DELETED_AUTHORS)

    for data in load_yaml_files(patterns):
        raw = substitute_env_vars(data.get("routing") or {})

        raw_channels = raw.get("channels")
        if raw_channels is not None:
            if not isinstance(raw_channels, dict):
                raise ValueError("'routing.channels' must be a mapping of kind to channel")
            channels.update({str(k): str(v) for k, v in raw_channels.items()})

        raw_deleted = raw.get("deleted_authors")
        if raw_deleted is not None:
            if not isinstance(raw_deleted, list):
                raise ValueError("'routing.deleted_authors' must be a list")
            deleted = {str(a).lower() for a in raw_deleted}

    logger.info("Routing %d kind(s): %s", len(channels), channels)

    return RoutingConfig(channels=channels, deleted_authors=frozenset(deleted))
