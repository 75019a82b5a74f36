"""HTTP GET with retries, per-attempt timeout and jittered exponential back-off.

Transient failures come in two shapes and are reported differently once the
attempts run out:

* retryable HTTP statuses (408, 429, 5xx gateway errors): the last response
  is returned so the caller can inspect it;
* transport errors (connection failures, timeouts): the last exception is
  raised.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Mapping
from urllib.parse import urlsplit

import httpx

from .fetch_models import FetchAttempt, FetchOptions

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = frozenset({408, 429, 500, 502, 503, 504})

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def default_headers(referer: str) -> dict[str, str]:
    """Browser-like request headers."""

    return {
        "User-Agent": BROWSER_USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "no-cache",
        "Referer": referer,
    }


def origin_referer(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.hostname or ''}"


def build_headers(url: str, options: FetchOptions) -> dict[str, str]:
    referer = options.referer if options.referer is not None else origin_referer(url)
    headers = default_headers(referer)
    headers.update(options.headers)
    return headers


def backoff_delay(base_seconds: float, attempt: int, jitter: float) -> float:
    """``base * 2^(attempt-1)`` scaled by ``jitter`` (expected in [0.5, 1.0])."""

    return base_seconds * (2 ** (attempt - 1)) * jitter


def _uniform_jitter() -> float:
    return random.uniform(0.5, 1.0)


@dataclass(slots=True)
class ResilientFetcher:
    """Issue a single logical GET with retry semantics.

    ``sleep`` and ``jitter`` are injectable so retry timing can be observed
    without waiting.
    """

    default_options: FetchOptions = field(default_factory=FetchOptions)
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    jitter: Callable[[], float] = _uniform_jitter
    log: logging.Logger = field(default_factory=lambda: logger)

    async def fetch(
        self,
        url: str,
        options: FetchOptions | None = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        opts = options or self.default_options
        if headers:
            opts = opts.with_overrides(headers={**opts.headers, **headers})
        request_headers = build_headers(url, opts)

        last_error: BaseException | None = None
        async with httpx.AsyncClient(
            timeout=opts.timeout_seconds, follow_redirects=True
        ) as client:
            for number in range(1, opts.max_attempts + 1):
                attempt = FetchAttempt(number=number, max_attempts=opts.max_attempts)
                try:
                    response = await asyncio.wait_for(
                        client.get(url, headers=request_headers),
                        timeout=opts.timeout_seconds,
                    )
                except (httpx.HTTPError, asyncio.TimeoutError) as exc:
                    last_error = exc
                    attempt.error = exc
                    if attempt.is_last:
                        break
                    await self._backoff(url, opts, attempt, "fetch.retry.error")
                    continue

                attempt.status_code = response.status_code
                if response.status_code in RETRYABLE_STATUS and not attempt.is_last:
                    await self._backoff(url, opts, attempt, "fetch.retry.status")
                    continue
                return response

        self.log.warning(
            "fetch.failed",
            extra={"url": url, "max_attempts": opts.max_attempts, "error": str(last_error)},
        )
        if last_error is None:  # pragma: no cover - loop always runs at least once
            raise RuntimeError(f"Failed to fetch {url} after {opts.max_attempts} attempts")
        raise last_error

    async def _backoff(
        self,
        url: str,
        opts: FetchOptions,
        attempt: FetchAttempt,
        event: str,
    ) -> None:
        delay = backoff_delay(opts.base_delay_seconds, attempt.number, self.jitter())
        self.log.info(event, extra=attempt.log_fields(url, delay))
        await self.sleep(delay)


__all__ = [
    "RETRYABLE_STATUS",
    "ResilientFetcher",
    "backoff_delay",
    "build_headers",
    "default_headers",
    "origin_referer",
]
