"""Dependency wiring helpers."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.errors import register_error_handlers
from .api.routes.convert import router as convert_router
from .api.routes.media import MirroredMediaService, build_media_router
from .config import AppConfig
from .converter.converter_client import ConversionService, build_conversion_service
from .fetch.fetch_client import ResilientFetcher
from .pipeline.pipeline_service import ConvertPipeline
from .storage.filesystem_store import FilesystemObjectStore
from .storage.object_store import ObjectStore

CORS_MAX_AGE_SECONDS = 86400


def include_routers(
    app: FastAPI,
    config: AppConfig,
    *,
    converter: ConversionService | None = None,
    store: ObjectStore | None = None,
    fetcher: ResilientFetcher | None = None,
) -> None:
    """Mount routers, middleware and attach services to ``app.state``."""
    fetch_options = config.fetch_options()
    object_store = store or FilesystemObjectStore(root=config.media_root)
    pipeline = ConvertPipeline(
        converter=converter
        or build_conversion_service(config.converter_endpoint, config.converter_api_token),
        mirror_config=config.mirror_config(),
        fetch_options=fetch_options,
        store=object_store,
        fetcher=fetcher or ResilientFetcher(default_options=fetch_options),
    )

    app.state.config = config
    app.state.store = object_store
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.cors_origin],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
        max_age=CORS_MAX_AGE_SECONDS,
    )
    register_error_handlers(app)

    app.include_router(convert_router)
    app.include_router(build_media_router(MirroredMediaService(store=object_store)))
