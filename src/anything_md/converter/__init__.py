"""Client side of the remote document-to-Markdown conversion service."""

from .converter_client import (
    ConversionService,
    HttpConversionService,
    UnconfiguredConversionService,
    build_conversion_service,
)
from .converter_models import ConversionFailure, ConversionResult, NamedBlob

__all__ = [
    "ConversionFailure",
    "ConversionResult",
    "ConversionService",
    "HttpConversionService",
    "NamedBlob",
    "UnconfiguredConversionService",
    "build_conversion_service",
]
