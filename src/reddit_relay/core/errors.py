# reddit_relay/core/errors.py
"""
Error taxonomy for the request pipeline.

None of these cross a queue boundary: they are delivered to callers as
``ApiResult.error`` or logged by the component that caught them.
"""
from __future__ import annotations


class RelayError(Exception):
    """Base class for errors reported by the relay."""


class ConfigurationError(RelayError):
    """A required setting (user agent, credentials) is missing."""


class AuthenticationError(RelayError):
    """No access token could be obtained for a request."""


class CompletionError(RuntimeError):
    """A task completion handle was signalled more than once."""
