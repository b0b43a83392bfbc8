"""Authenticated, rate-limited access to the upstream API."""

from reddit_relay.core.api.models import ApiRequest, ApiResult
from reddit_relay.core.api.listing import parse_listing, sort_oldest_first
from reddit_relay.core.api.pipeline import RequestPipeline

__all__ = [
    "ApiRequest",
    "ApiResult",
    "parse_listing",
    "sort_oldest_first",
    "RequestPipeline",
]
