"""Resilient HTTP fetching with retries, timeout and back-off."""

from .fetch_client import RETRYABLE_STATUS, ResilientFetcher, default_headers
from .fetch_models import FetchAttempt, FetchOptions

__all__ = [
    "RETRYABLE_STATUS",
    "FetchAttempt",
    "FetchOptions",
    "ResilientFetcher",
    "default_headers",
]
