"""Domain level exceptions for the fetch/convert/mirror pipeline."""

from __future__ import annotations

__all__ = [
    "AppError",
    "InvalidTargetUrlError",
    "UpstreamFetchError",
    "ConversionFailedError",
    "ConverterNotConfiguredError",
    "ObjectStoreError",
]


class AppError(Exception):
    """Base class for application specific errors."""


class InvalidTargetUrlError(AppError):
    """Raised when the requested document URL is not an absolute http(s) URL."""


class UpstreamFetchError(AppError):
    """Raised when the origin answered the document fetch with a non-success status."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Failed to fetch URL: {status_code} {reason}".rstrip())


class ConversionFailedError(AppError):
    """Raised when the conversion service reports a typed failure."""

    def __init__(self, kind: str, reason: str) -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(f"Conversion failed: {reason}")


class ConverterNotConfiguredError(AppError):
    """Raised when no conversion service endpoint is configured."""


class ObjectStoreError(AppError):
    """Raised when the object store rejects a key or fails to persist an object."""
