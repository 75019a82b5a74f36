"""Fetch a document, convert it to Markdown and mirror its images."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from ..config import MirrorConfig
from ..converter.converter_client import ConversionService
from ..converter.converter_models import ConversionFailure, NamedBlob
from ..exceptions import ConversionFailedError, InvalidTargetUrlError, UpstreamFetchError
from ..fetch.fetch_client import ResilientFetcher
from ..fetch.fetch_models import FetchOptions
from ..media.media_mirror import MediaMirror
from ..media.media_refs import collect_references
from ..media.media_rewriter import rewrite
from ..storage.object_store import ObjectStore
from .html_prep import extract_title, file_name_for, is_html_content, preprocess_html
from .scheduler import TaskScheduler

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class ConvertedDocument:
    url: str
    name: str
    mime_type: str
    tokens: int | None
    markdown: str

    def to_payload(self) -> dict[str, object]:
        return {
            "success": True,
            "url": self.url,
            "name": self.name,
            "mimeType": self.mime_type,
            "tokens": self.tokens,
            "markdown": self.markdown,
        }


def validate_target_url(url: str) -> str:
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise InvalidTargetUrlError("Invalid URL provided.") from exc
    if parts.scheme not in {"http", "https"} or not parts.hostname:
        raise InvalidTargetUrlError("Invalid URL provided.")
    return url


@dataclass(slots=True)
class ConvertPipeline:
    """Critical path: fetch and convert. Image mirroring is handed to a scheduler."""

    converter: ConversionService
    mirror_config: MirrorConfig
    fetch_options: FetchOptions = field(default_factory=FetchOptions)
    store: ObjectStore | None = None
    fetcher: ResilientFetcher = field(default_factory=ResilientFetcher)
    mirror: MediaMirror | None = None
    log: logging.Logger = field(default_factory=lambda: logger)

    def __post_init__(self) -> None:
        if self.mirror is None and self.store is not None:
            self.mirror = MediaMirror(
                store=self.store, config=self.mirror_config, fetcher=self.fetcher
            )

    @property
    def mirroring_enabled(self) -> bool:
        return self.mirror_config.enabled and self.mirror is not None

    async def convert_url(self, url: str, scheduler: TaskScheduler) -> ConvertedDocument:
        validate_target_url(url)

        response = await self.fetcher.fetch(url, self.fetch_options)
        if not response.is_success:
            raise UpstreamFetchError(response.status_code, response.reason_phrase)

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        body = response.content
        file_name = file_name_for(url)
        processed_html = ""

        if is_html_content(content_type):
            raw_html = body.decode("utf-8", errors="replace")
            processed_html = preprocess_html(raw_html)
            body = processed_html.encode("utf-8")
            fallback = file_name[: -len(".html")] if file_name.endswith(".html") else file_name
            file_name = f"{extract_title(raw_html, fallback)}.html"

        result = await self.converter.convert(
            NamedBlob(name=file_name, data=body, media_type=content_type)
        )
        if isinstance(result, ConversionFailure):
            self.log.warning(
                "pipeline.conversion.failed",
                extra={"url": url, "kind": result.kind, "reason": result.reason},
            )
            raise ConversionFailedError(result.kind, result.reason)

        markdown = result.text
        image_urls: set[str] = set()
        if self.mirroring_enabled:
            markdown, image_urls = self._rewrite_images(processed_html, markdown)
            if image_urls:
                assert self.mirror is not None
                scheduler.schedule(self.mirror.mirror, sorted(image_urls))

        self.log.info(
            "pipeline.converted",
            extra={
                "url": url,
                "file_name": result.name,
                "content_type": content_type,
                "images": len(image_urls),
            },
        )
        return ConvertedDocument(
            url=url,
            name=result.name,
            mime_type=result.mime_type,
            tokens=result.tokens,
            markdown=markdown,
        )

    def _rewrite_images(self, raw_html: str, markdown: str) -> tuple[str, set[str]]:
        suffixes = self.mirror_config.allowed_host_suffixes
        image_urls = collect_references(raw_html, markdown, suffixes)
        if not image_urls:
            return markdown, image_urls
        assert self.mirror_config.public_base_url is not None
        rewritten = rewrite(markdown, image_urls, self.mirror_config.public_base_url, suffixes)
        return rewritten, image_urls
