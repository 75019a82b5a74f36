"""Filesystem-backed object store with JSON metadata sidecars."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from ..exceptions import ObjectStoreError
from ..media.media_models import CacheMetadata, CacheObject
from .object_store import ObjectStore, cache_control_directive

METADATA_SUFFIX = ".meta.json"


@dataclass(slots=True)
class FilesystemObjectStore(ObjectStore):
    """Stores ``key`` at ``root/key`` and its metadata at ``root/key.meta.json``."""

    root: Path
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def path_for(self, key: str) -> Path:
        root = self.root.resolve()
        target = (root / key).resolve()
        if not key or target == root or root not in target.parents:
            raise ObjectStoreError(f"Object key escapes store root: {key!r}")
        return target

    @staticmethod
    def _metadata_path(path: Path) -> Path:
        return path.with_name(path.name + METADATA_SUFFIX)

    async def exists(self, key: str) -> bool:
        path = self.path_for(key)
        return await asyncio.to_thread(self._metadata_path(path).is_file)

    async def put(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str,
        cache_control_max_age_seconds: int,
        metadata: CacheMetadata,
    ) -> None:
        path = self.path_for(key)
        sidecar = {
            "contentType": content_type,
            "cacheControl": cache_control_directive(cache_control_max_age_seconds),
            "customMetadata": metadata.to_dict(),
        }
        try:
            await asyncio.to_thread(self._write, path, data, sidecar)
        except OSError as exc:
            raise ObjectStoreError(f"Failed to write {key}: {exc}") from exc
        self.log.debug("store.put", extra={"key": key, "size_bytes": len(data)})

    async def get(self, key: str) -> CacheObject | None:
        path = self.path_for(key)
        return await asyncio.to_thread(self._read, key, path)

    def _write(self, path: Path, data: bytes, sidecar: dict[str, object]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write(path, data)
        # Sidecar last: its presence marks the object complete.
        _atomic_write(
            self._metadata_path(path),
            json.dumps(sidecar, ensure_ascii=False).encode("utf-8"),
        )

    def _read(self, key: str, path: Path) -> CacheObject | None:
        meta_path = self._metadata_path(path)
        if not meta_path.is_file() or not path.is_file():
            return None
        sidecar = json.loads(meta_path.read_text(encoding="utf-8"))
        return CacheObject(
            key=key,
            data=path.read_bytes(),
            content_type=sidecar["contentType"],
            cache_control=sidecar["cacheControl"],
            metadata=CacheMetadata.from_dict(sidecar["customMetadata"]),
        )


def _atomic_write(path: Path, data: bytes) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=path.suffix)
    try:
        with os.fdopen(fd, "wb") as sink:
            sink.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
