"""Abstractions over mirror object storage backends."""

from __future__ import annotations

from ..media.media_models import CacheMetadata, CacheObject


def cache_control_directive(max_age_seconds: int) -> str:
    return f"public, max-age={max_age_seconds}"


class ObjectStore:
    """Durable key/value store for mirrored images.

    The mirror only probes for existence and writes; ``get`` exists for the
    serving route.
    """

    async def exists(self, key: str) -> bool:
        """Lightweight existence probe for ``key`` (no content read)."""

        raise NotImplementedError

    async def put(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str,
        cache_control_max_age_seconds: int,
        metadata: CacheMetadata,
    ) -> None:
        """Persist ``data`` under ``key`` with HTTP and custom metadata."""

        raise NotImplementedError

    async def get(self, key: str) -> CacheObject | None:
        """Return the stored object or ``None`` when absent."""

        raise NotImplementedError
