"""Locate mirrorable image URLs in raw markup and converted text."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

TRAILING_NOISE = re.compile(r"[,.)\]]+$")


@lru_cache(maxsize=32)
def _compile(suffixes: tuple[str, ...]) -> re.Pattern[str]:
    hosts = "|".join(re.escape(suffix) for suffix in sorted(suffixes, key=len, reverse=True))
    return re.compile(
        rf"https?://[\w.-]*(?:{hosts})/[^?\s\"'<>)\]]+(?:\?[^&\s\"'<>)\]]+)?",
        re.IGNORECASE,
    )


def build_reference_pattern(allowed_host_suffixes: Iterable[str]) -> re.Pattern[str]:
    """Single pattern matching image URLs on any allowed host suffix."""

    suffixes = tuple(sorted({suffix for suffix in allowed_host_suffixes if suffix}))
    if not suffixes:
        raise ValueError("at least one allowed host suffix is required")
    return _compile(suffixes)


def collect_references(
    raw_markup: str,
    converted_text: str,
    allowed_host_suffixes: Iterable[str],
) -> set[str]:
    """Union of image URLs found in both inputs, trailing punctuation trimmed."""

    pattern = build_reference_pattern(allowed_host_suffixes)
    matches: set[str] = set()
    for source in (raw_markup, converted_text):
        if source:
            matches.update(match.group(0) for match in pattern.finditer(source))
    return {TRAILING_NOISE.sub("", url) for url in matches}
