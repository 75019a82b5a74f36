"""Serve mirrored images from the object store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from ...exceptions import ObjectStoreError
from ...storage.object_store import ObjectStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class MirroredMediaService:
    """Expose mirrored objects until their ``expiresAt`` passes."""

    store: ObjectStore
    clock: Callable[[], datetime] = _utcnow

    async def open_media(self, key: str) -> Response:
        try:
            obj = await self.store.get(key)
        except ObjectStoreError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Media not found") from exc
        if obj is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Media not found")

        if obj.metadata.expires_at <= self.clock():
            raise HTTPException(status_code=status.HTTP_410_GONE, detail="Media expired")

        return Response(
            content=obj.data,
            media_type=obj.content_type,
            headers={"Cache-Control": obj.cache_control},
        )


def build_media_router(service: MirroredMediaService) -> APIRouter:
    router = APIRouter(prefix="/media", tags=["media"])

    @router.get("/{key:path}")
    async def get_media(key: str) -> Response:
        return await service.open_media(key)

    return router
