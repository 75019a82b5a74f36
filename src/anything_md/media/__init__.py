"""Image reference extraction, cache keys, rewriting and mirroring."""

from .media_keys import derive_key, infer_extension
from .media_mirror import MediaMirror
from .media_models import BatchStats, CacheKey, CacheMetadata, CacheObject
from .media_refs import build_reference_pattern, collect_references
from .media_rewriter import rewrite

__all__ = [
    "BatchStats",
    "CacheKey",
    "CacheMetadata",
    "CacheObject",
    "MediaMirror",
    "build_reference_pattern",
    "collect_references",
    "derive_key",
    "infer_extension",
    "rewrite",
]
