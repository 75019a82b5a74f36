"""Conversion service payload models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    CONVERSION_ERROR = "conversion_error"
    HTTP_ERROR = "http_error"
    UNAVAILABLE = "unavailable"
    INVALID_RESPONSE = "invalid_response"


@dataclass(frozen=True, slots=True)
class NamedBlob:
    name: str
    data: bytes
    media_type: str


@dataclass(frozen=True, slots=True)
class ConversionResult:
    name: str
    mime_type: str
    tokens: int | None
    text: str


@dataclass(frozen=True, slots=True)
class ConversionFailure:
    kind: str
    reason: str
