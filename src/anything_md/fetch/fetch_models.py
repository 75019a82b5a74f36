"""Fetch option and attempt models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Mapping


@dataclass(frozen=True, slots=True)
class FetchOptions:
    """Per-call knobs for :class:`~.fetch_client.ResilientFetcher`."""

    max_attempts: int = 3
    base_delay_seconds: float = 0.8
    timeout_seconds: float = 15.0
    referer: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

    def with_overrides(self, **changes: object) -> "FetchOptions":
        return replace(self, **changes)


@dataclass(slots=True)
class FetchAttempt:
    """Outcome of one attempt inside the retry loop. Never persisted."""

    number: int
    max_attempts: int
    status_code: int | None = None
    error: BaseException | None = None

    @property
    def is_last(self) -> bool:
        return self.number >= self.max_attempts

    def log_fields(self, url: str, delay: float) -> dict[str, object]:
        fields: dict[str, object] = {
            "url": url,
            "attempt": self.number,
            "max_attempts": self.max_attempts,
            "delay_seconds": round(delay, 3),
        }
        if self.status_code is not None:
            fields["status_code"] = self.status_code
        if self.error is not None:
            fields["error"] = str(self.error) or type(self.error).__name__
        return fields
