"""FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI

from .config import AppConfig
from .converter.converter_client import ConversionService
from .dependencies import include_routers
from .fetch.fetch_client import ResilientFetcher
from .logging import configure_logging
from .storage.object_store import ObjectStore


def create_app(
    config: AppConfig | None = None,
    *,
    converter: ConversionService | None = None,
    store: ObjectStore | None = None,
    fetcher: ResilientFetcher | None = None,
) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    configure_logging()
    cfg = config or AppConfig.build_default()
    app = FastAPI(title="anything-md")
    include_routers(app, cfg, converter=converter, store=store, fetcher=fetcher)
    return app


app = create_app()
