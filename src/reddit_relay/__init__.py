"""Rate-limited Reddit OAuth client that relays listing records to workers."""

__version__ = "0.1.0"
