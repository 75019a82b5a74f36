"""anything-md service package.

Fetches remote documents, hands them to a Markdown conversion service and
mirrors hotlink-protected images into a TTL-tagged object store.
"""

from .config import AppConfig, MirrorConfig

__all__ = ["AppConfig", "MirrorConfig"]
