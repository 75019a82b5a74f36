"""Object store abstractions for mirrored media."""

from .filesystem_store import FilesystemObjectStore
from .object_store import ObjectStore, cache_control_directive

__all__ = ["FilesystemObjectStore", "ObjectStore", "cache_control_directive"]
