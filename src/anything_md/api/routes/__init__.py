"""Route builders."""

from .convert import router as convert_router
from .media import build_media_router

__all__ = ["build_media_router", "convert_router"]
