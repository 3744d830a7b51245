"""URL shortening WSGI service with base62 keys, pluggable storage, a Redis cache and rate limiters."""

__version__ = "0.1.0"