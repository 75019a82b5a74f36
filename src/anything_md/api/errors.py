"""Error envelope and exception handlers for the HTTP API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed. Use GET or POST."


def json_response(payload: dict[str, Any], status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=payload)


def error_response(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    """``{"success": false, "error": message}`` with the given status."""

    return json_response({"success": False, "error": message}, status_code)


@dataclass(slots=True)
class ApiError(Exception):
    """Structured application-level error for HTTP handlers."""

    status_code: int
    message: str

    def to_response(self) -> JSONResponse:
        return error_response(self.message, self.status_code)


async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return exc.to_response()


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return error_response(METHOD_NOT_ALLOWED_MESSAGE, exc.status_code)
    return error_response(str(exc.detail), exc.status_code)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]


__all__ = [
    "ApiError",
    "error_response",
    "json_response",
    "register_error_handlers",
]
