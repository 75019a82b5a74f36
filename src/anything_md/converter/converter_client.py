"""Conversion service interface and its HTTP implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..exceptions import ConverterNotConfiguredError
from .converter_models import ConversionFailure, ConversionResult, FailureKind, NamedBlob

logger = logging.getLogger(__name__)


class ConversionService(ABC):
    """Opaque document-to-Markdown converter."""

    @abstractmethod
    async def convert(self, blob: NamedBlob) -> ConversionResult | ConversionFailure:
        """Convert ``blob`` and return text or a typed failure."""


@dataclass(slots=True)
class HttpConversionService(ConversionService):
    """Call a ``toMarkdown``-style REST endpoint with a multipart upload.

    Expected body: ``{"result": [{"name", "mimeType", "format", "tokens",
    "data" | "error"}]}``. The service is called once; failures are reported,
    not retried.
    """

    endpoint: str
    api_token: str | None = None
    timeout_seconds: float = 60.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def convert(self, blob: NamedBlob) -> ConversionResult | ConversionFailure:
        headers = {"Authorization": f"Bearer {self.api_token}"} if self.api_token else {}
        files = {"files": (blob.name, blob.data, blob.media_type)}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(self.endpoint, headers=headers, files=files)
        except httpx.HTTPError as exc:
            self.log.warning(
                "converter.request.failed",
                extra={"file_name": blob.name, "error": str(exc)},
            )
            return ConversionFailure(FailureKind.UNAVAILABLE.value, f"Conversion service unreachable: {exc}")

        if response.status_code < 200 or response.status_code >= 300:
            self.log.warning(
                "converter.request.status",
                extra={"file_name": blob.name, "status_code": response.status_code},
            )
            return ConversionFailure(
                FailureKind.HTTP_ERROR.value,
                f"Conversion service returned status {response.status_code}",
            )

        try:
            entry = _first_result(response.json())
        except ValueError as exc:
            return ConversionFailure(FailureKind.INVALID_RESPONSE.value, str(exc))

        if entry.get("format") == "error":
            reason = str(entry.get("error") or "Unknown error")
            return ConversionFailure(FailureKind.CONVERSION_ERROR.value, reason)

        tokens = entry.get("tokens")
        return ConversionResult(
            name=str(entry.get("name") or blob.name),
            mime_type=str(entry.get("mimeType") or blob.media_type),
            tokens=int(tokens) if tokens is not None else None,
            text=str(entry.get("data") or ""),
        )


def _first_result(body: Any) -> dict[str, Any]:
    results = body.get("result") if isinstance(body, dict) else None
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        raise ValueError("Conversion service response has no result entries")
    return results[0]


class UnconfiguredConversionService(ConversionService):
    """Placeholder used when no conversion endpoint is configured."""

    async def convert(self, blob: NamedBlob) -> ConversionResult | ConversionFailure:
        raise ConverterNotConfiguredError("Conversion service endpoint is not configured")


def build_conversion_service(endpoint: str | None, api_token: str | None = None) -> ConversionService:
    if not endpoint:
        return UnconfiguredConversionService()
    return HttpConversionService(endpoint=endpoint, api_token=api_token)
