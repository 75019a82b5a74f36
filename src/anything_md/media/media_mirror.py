"""Background mirroring of hotlink-protected images into the object store."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable

from ..config import MirrorConfig
from ..fetch.fetch_client import ResilientFetcher
from ..fetch.fetch_models import FetchOptions
from ..storage.object_store import ObjectStore
from .media_keys import derive_key
from .media_models import BatchStats, CacheMetadata, MirrorOutcome

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"
IMAGE_ACCEPT = "image/*,*/*;q=0.8"


def _default_clock() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class MediaMirror:
    """Download images and write them to ``store`` in bounded windows.

    Runs detached from the request that discovered the URLs; results are only
    visible through logs and the returned :class:`BatchStats`.
    """

    store: ObjectStore
    config: MirrorConfig
    fetcher: ResilientFetcher = field(default_factory=ResilientFetcher)
    download_options: FetchOptions | None = None
    clock: Callable[[], datetime] = _default_clock
    log: logging.Logger = field(default_factory=lambda: logger)

    def _options(self) -> FetchOptions:
        if self.download_options is not None:
            return self.download_options
        return FetchOptions(
            max_attempts=2,
            timeout_seconds=10.0,
            referer=self.config.referer,
            headers={"Accept": IMAGE_ACCEPT},
        )

    async def mirror(self, urls: Iterable[str]) -> BatchStats:
        stats = BatchStats()
        pending = list(dict.fromkeys(urls))
        if not pending:
            return stats

        window = max(1, self.config.concurrency_limit)
        for start in range(0, len(pending), window):
            batch = pending[start : start + window]
            results = await asyncio.gather(
                *(self._mirror_one(url) for url in batch),
                return_exceptions=True,
            )
            for url, result in zip(batch, results):
                if isinstance(result, BaseException):
                    if not isinstance(result, Exception):
                        raise result
                    self.log.warning(
                        "mirror.item.error",
                        extra={"url": url, "error": repr(result)},
                    )
                    stats.record(MirrorOutcome.FAILED)
                else:
                    stats.record(result)

        self.log.info(
            "mirror.batch.done",
            extra={
                "uploaded": stats.uploaded,
                "skipped": stats.skipped,
                "failed": stats.failed,
            },
        )
        return stats

    async def _mirror_one(self, url: str) -> MirrorOutcome:
        cache_key = derive_key(url, self.config.allowed_host_suffixes)
        if cache_key is None:
            return MirrorOutcome.SKIPPED

        if await self.store.exists(cache_key.key):
            self.log.debug("mirror.item.cached", extra={"url": url, "key": cache_key.key})
            return MirrorOutcome.SKIPPED

        response = await self.fetcher.fetch(url, self._options())
        if not response.is_success:
            self.log.warning(
                "mirror.item.download_failed",
                extra={"url": url, "status_code": response.status_code},
            )
            return MirrorOutcome.FAILED

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        data = response.content
        expires_at = self.clock() + timedelta(hours=self.config.ttl_hours)
        await self.store.put(
            cache_key.key,
            data,
            content_type=content_type,
            cache_control_max_age_seconds=self.config.cache_max_age_seconds,
            metadata=CacheMetadata(
                expires_at=expires_at,
                original_url=url,
                extension=cache_key.inferred_extension,
            ),
        )
        self.log.info(
            "mirror.item.uploaded",
            extra={"url": url, "key": cache_key.key, "size_bytes": len(data)},
        )
        return MirrorOutcome.UPLOADED
