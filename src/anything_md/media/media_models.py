"""Media data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True, slots=True)
class CacheKey:
    key: str
    inferred_extension: str


@dataclass(frozen=True, slots=True)
class CacheMetadata:
    expires_at: datetime
    original_url: str
    extension: str

    def to_dict(self) -> dict[str, str]:
        return {
            "expiresAt": self.expires_at.isoformat(),
            "originalUrl": self.original_url,
            "extension": self.extension,
        }

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> "CacheMetadata":
        return cls(
            expires_at=datetime.fromisoformat(data["expiresAt"]),
            original_url=data["originalUrl"],
            extension=data["extension"],
        )


@dataclass(frozen=True, slots=True)
class CacheObject:
    """Stored mirror entry. Written once per key, never mutated."""

    key: str
    data: bytes
    content_type: str
    cache_control: str
    metadata: CacheMetadata


class MirrorOutcome(str, Enum):
    UPLOADED = "uploaded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True)
class BatchStats:
    uploaded: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.uploaded + self.skipped + self.failed

    def record(self, outcome: MirrorOutcome) -> None:
        if outcome is MirrorOutcome.UPLOADED:
            self.uploaded += 1
        elif outcome is MirrorOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1
