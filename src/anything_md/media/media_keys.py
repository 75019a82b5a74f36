"""Deterministic object-store keys for mirrored images.

``https://mmbiz.qpic.cn/sz_mmbiz_png/abc/640?wx_fmt=png`` maps to
``mmbiz_qpic_cn/sz_mmbiz_png/abc/640.png``. No I/O happens here.
"""

from __future__ import annotations

from typing import Iterable
from urllib.parse import SplitResult, parse_qs, urlsplit

from .media_models import CacheKey

DEFAULT_EXTENSION = "jpg"

FORMAT_EXTENSIONS: dict[str, str] = {
    "png": "png",
    "gif": "gif",
    "webp": "webp",
    "svg": "svg",
    "jpeg": "jpg",
    "jpg": "jpg",
}

FORMAT_QUERY_PARAM = "wx_fmt"


def _split(url: str) -> SplitResult | None:
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if parts.scheme not in {"http", "https"} or not parts.hostname:
        return None
    return parts


def _host_allowed(hostname: str, allowed_host_suffixes: Iterable[str]) -> bool:
    return any(suffix and hostname.endswith(suffix.lower()) for suffix in allowed_host_suffixes)


def infer_extension(url: str | SplitResult) -> str:
    """Query format parameter, then a ``_<fmt>`` path hint, then ``jpg``."""

    parts = urlsplit(url) if isinstance(url, str) else url
    formats = parse_qs(parts.query).get(FORMAT_QUERY_PARAM)
    if formats and formats[0]:
        fmt = formats[0]
        return FORMAT_EXTENSIONS.get(fmt, fmt)

    for hint, extension in FORMAT_EXTENSIONS.items():
        if f"_{hint}" in parts.path:
            return extension
    return DEFAULT_EXTENSION


def derive_key(url: str, allowed_host_suffixes: Iterable[str]) -> CacheKey | None:
    """Return the cache key for ``url`` or ``None`` when it must not be cached."""

    parts = _split(url)
    if parts is None:
        return None
    hostname = parts.hostname or ""
    if not _host_allowed(hostname, allowed_host_suffixes):
        return None

    prefix = hostname.replace(".", "_")
    path = parts.path[1:] if parts.path.startswith("/") else parts.path
    extension = infer_extension(parts)
    return CacheKey(key=f"{prefix}/{path}.{extension}", inferred_extension=extension)


__all__ = [
    "DEFAULT_EXTENSION",
    "FORMAT_EXTENSIONS",
    "derive_key",
    "infer_extension",
]
