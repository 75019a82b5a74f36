"""Synchronous rewrite of image URLs to their mirrored public URLs."""

from __future__ import annotations

import re
from typing import Iterable

from .media_keys import derive_key

_QUERY_TAIL = r"[^)\s\"'<>\]]+"


def rewrite(
    text: str,
    urls: Iterable[str],
    public_base_url: str,
    allowed_host_suffixes: Iterable[str],
) -> str:
    """Replace every occurrence of each URL with ``{public_base_url}/{key}``.

    Trailing ``&amp;...`` / ``&...`` query noise after a URL is absorbed into
    the replacement. URLs without a derivable key are left untouched.
    """

    suffixes = tuple(allowed_host_suffixes)
    base = public_base_url.rstrip("/")
    result = text
    # Longest first so a URL that prefixes another does not split it.
    for url in sorted(set(urls), key=len, reverse=True):
        cache_key = derive_key(url, suffixes)
        if cache_key is None:
            continue
        replacement = f"{base}/{cache_key.key}"
        # Matches both `&...` and `&amp;...` tails.
        pattern = re.escape(url) + rf"(?:&{_QUERY_TAIL})*"
        result = re.sub(pattern, lambda _: replacement, result)
    return result
