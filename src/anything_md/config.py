"""Application configuration for anything-md.

Values come from ``ANYTHING_MD_*`` environment variables and are read once
when the application is built. Components never consult the environment
directly: they receive :class:`MirrorConfig` / :class:`FetchOptions` values
derived from :class:`AppConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .fetch.fetch_models import FetchOptions

DEFAULT_IMAGE_PROXY_HOSTS = "qpic.cn"
DEFAULT_IMAGE_REFERER = "https://mp.weixin.qq.com/"


def _default_media_root() -> Path:
    return Path("./var/media")


@dataclass(frozen=True, slots=True)
class MirrorConfig:
    """Settings shared by the reference extractor, key deriver, rewriter and mirror."""

    allowed_host_suffixes: tuple[str, ...] = (DEFAULT_IMAGE_PROXY_HOSTS,)
    ttl_hours: float = 8
    cache_max_age_seconds: int = 8 * 60 * 60
    concurrency_limit: int = 5
    public_base_url: str | None = None
    referer: str = DEFAULT_IMAGE_REFERER

    @property
    def enabled(self) -> bool:
        return bool(self.public_base_url)


class AppConfig(BaseSettings):
    """Pydantic settings container for the service."""

    model_config = SettingsConfigDict(env_prefix="ANYTHING_MD_")

    image_proxy_hosts: str = Field(
        default=DEFAULT_IMAGE_PROXY_HOSTS,
        description="Comma-separated host suffixes whose images are mirrored.",
    )
    image_ttl_hours: float = Field(
        default=8,
        gt=0,
        description="Lifetime of mirrored images, written as expiresAt metadata.",
    )
    image_upload_concurrency: int = Field(
        default=5,
        ge=1,
        description="Maximum number of concurrent image downloads per request.",
    )
    image_cache_max_age_seconds: int | None = Field(
        default=None,
        ge=0,
        description="Cache-Control max-age for mirrored objects (defaults to the TTL).",
    )
    image_public_base_url: str | None = Field(
        default=None,
        description="Public base URL of the mirror store; unset disables mirroring.",
    )
    image_referer: str = Field(
        default=DEFAULT_IMAGE_REFERER,
        description="Referer sent when downloading hotlink-protected images.",
    )
    media_root: Path = Field(
        default_factory=_default_media_root,
        description="Filesystem root of the mirror object store.",
    )
    fetch_timeout_ms: int = Field(default=15_000, ge=1)
    fetch_max_attempts: int = Field(default=3, ge=1)
    fetch_base_delay_ms: int = Field(default=800, ge=0)
    cors_origin: str = Field(default="*")
    converter_endpoint: str | None = Field(
        default=None,
        description="URL of the remote Markdown conversion service.",
    )
    converter_api_token: str | None = Field(default=None)

    @field_validator("image_public_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().rstrip("/")
        return value or None

    @property
    def allowed_image_hosts(self) -> tuple[str, ...]:
        hosts = tuple(part.strip() for part in self.image_proxy_hosts.split(","))
        return tuple(host for host in hosts if host) or (DEFAULT_IMAGE_PROXY_HOSTS,)

    def fetch_options(self) -> FetchOptions:
        """Options for the primary document fetch."""

        return FetchOptions(
            max_attempts=self.fetch_max_attempts,
            base_delay_seconds=self.fetch_base_delay_ms / 1000,
            timeout_seconds=self.fetch_timeout_ms / 1000,
        )

    def mirror_config(self) -> MirrorConfig:
        max_age = self.image_cache_max_age_seconds
        if max_age is None:
            max_age = int(self.image_ttl_hours * 60 * 60)
        return MirrorConfig(
            allowed_host_suffixes=self.allowed_image_hosts,
            ttl_hours=self.image_ttl_hours,
            cache_max_age_seconds=max_age,
            concurrency_limit=self.image_upload_concurrency,
            public_base_url=self.image_public_base_url,
            referer=self.image_referer,
        )

    @classmethod
    def build_default(cls) -> "AppConfig":
        return cls()


__all__ = ["AppConfig", "MirrorConfig"]
