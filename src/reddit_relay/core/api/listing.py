# reddit_relay/core/api/listing.py
"""
Listing payload parsing.

A listing is ``{"data": {"children": [...]}}``; each child becomes a
``ModelRecord``. The API does not guarantee child order, so callers sort
by the base-36 id.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import BaseModel, ValidationError

from reddit_relay.contracts.models import ModelRecord

logger = logging.getLogger(__name__)


class _ListingData(BaseModel):
    # Each child is validated on its own in parse_listing
    children: list[Any]


class _Listing(BaseModel):
    data: _ListingData


def parse_listing(body: str | bytes | None) -> list[ModelRecord] | None:
    """
    Parse a listing body into records, oldest first.

    Returns None when the body is not JSON or lacks ``data.children``.
    Children that are not valid records are skipped with a warning.
    """
    if not body:
        return None

    try:
        listing = _Listing.model_validate_json(body)
    except ValidationError as exc:
        logger.warning("Unparsable listing body: %s", exc.errors()[0]["msg"])
        return None

    records: list[ModelRecord] = []
    for index, raw in enumerate(listing.data.children):
        try:
            records.append(ModelRecord.model_validate(raw))
        except ValidationError as exc:
            logger.warning(
                "Skipping listing child %d: %s",
                index,
                exc.errors()[0]["msg"],
                extra={"kind": raw.get("kind") if isinstance(raw, dict) else None},
            )

    return sort_oldest_first(records)


def sort_oldest_first(records: Iterable[ModelRecord]) -> list[ModelRecord]:
    return sorted(records, key=lambda r: r.numeric_id)
