"""HTML helpers: lazy-image fix-up, title extraction and file naming."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_LAZY_IMG = re.compile(
    r"<img\s+([^>]*?)data-src=[\"']([^\"']+)[\"']([^>]*)>", re.IGNORECASE
)
_SRC_VALUE = re.compile(r"(?<![\w-])src=[\"']([^\"']*)[\"']", re.IGNORECASE)
_SRC_ATTR = re.compile(r"(?<![\w-])src=[\"'][^\"']*[\"']\s*", re.IGNORECASE)

_OG_TITLE = re.compile(
    r"<meta\s+property=[\"']og:title[\"']\s+content=[\"'](.*?)[\"']\s*/?>", re.IGNORECASE
)
_TWITTER_TITLE = re.compile(
    r"<meta\s+property=[\"']twitter:title[\"']\s+content=[\"'](.*?)[\"']\s*/?>",
    re.IGNORECASE,
)
_TITLE_TAG = re.compile(r"<title>(.*?)</title>", re.IGNORECASE)

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_FILENAME = re.compile(r"[\\/:*?\"<>|]")
_DISALLOWED = re.compile(r"[^\w\u4e00-\u9fa5_\-.]", re.ASCII)
MAX_TITLE_LENGTH = 100


def is_html_content(content_type: str) -> bool:
    return "text/html" in content_type or "application/xhtml" in content_type


def file_name_for(url: str) -> str:
    """Last path segment, ``.html`` appended when it has no extension."""

    try:
        path = urlsplit(url).path
    except ValueError:
        return "page.html"
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return "page.html"
    segment = segments[-1]
    return segment if "." in segment else f"{segment}.html"


def escape_html_attr(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


def _resolve_lazy_image(match: re.Match[str]) -> str:
    before, data_src, after = match.group(1), match.group(2), match.group(3)
    src_match = _SRC_VALUE.search(before + after)
    src_value = src_match.group(1) if src_match else ""
    if src_value and not src_value.startswith("data:"):
        return match.group(0)

    clean_before = _SRC_ATTR.sub("", before)
    clean_after = _SRC_ATTR.sub("", after)
    safe_src = escape_html_attr(data_src)
    return f'<img {clean_before}src="{safe_src}" data-src="{safe_src}"{clean_after}>'


def preprocess_html(html: str) -> str:
    """Copy ``data-src`` into ``src`` where ``src`` is empty or a data-URI placeholder."""

    return _LAZY_IMG.sub(_resolve_lazy_image, html)


def extract_title(html: str, fallback_id: str) -> str:
    """og:title, twitter:title, <title>, then ``page-{fallback_id}``; filename-safe."""

    title = ""
    for pattern in (_OG_TITLE, _TWITTER_TITLE, _TITLE_TAG):
        match = pattern.search(html)
        if match and match.group(1):
            title = match.group(1).strip()
            break
    if not title:
        title = f"page-{fallback_id}"

    title = _WHITESPACE.sub("_", title)
    title = _UNSAFE_FILENAME.sub("", title)
    title = _DISALLOWED.sub("", title)
    return title[:MAX_TITLE_LENGTH]
