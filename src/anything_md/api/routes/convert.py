"""HTTP routes for URL-to-Markdown conversion."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import JSONResponse

from ...exceptions import ConversionFailedError, InvalidTargetUrlError, UpstreamFetchError
from ...pipeline.pipeline_service import ConvertPipeline
from ...pipeline.scheduler import BackgroundTasksScheduler
from ..errors import ApiError, error_response, json_response

router = APIRouter(tags=["convert"])
logger = logging.getLogger(__name__)

INVALID_JSON_MESSAGE = 'Invalid JSON body. Expected: { "url": "https://..." }'

USAGE_PAYLOAD = {
    "success": True,
    "message": "Anything-MD API - Convert any URL to Markdown",
    "usage": {
        "GET": "/?url=https://example.com",
        "POST": '/ with JSON body { "url": "https://example.com" }',
    },
}


def get_pipeline(request: Request) -> ConvertPipeline:
    """Fetch the conversion pipeline from application state."""
    try:
        return request.app.state.pipeline  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - wiring error
        raise RuntimeError("ConvertPipeline is not configured") from exc


async def _convert(
    target_url: str | None,
    pipeline: ConvertPipeline,
    background_tasks: BackgroundTasks,
) -> JSONResponse:
    if not target_url:
        return json_response(USAGE_PAYLOAD)

    scheduler = BackgroundTasksScheduler(background_tasks)
    try:
        document = await pipeline.convert_url(target_url, scheduler)
    except InvalidTargetUrlError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    except UpstreamFetchError as exc:
        raise ApiError(status.HTTP_502_BAD_GATEWAY, str(exc)) from exc
    except ConversionFailedError as exc:
        raise ApiError(422, str(exc)) from exc
    except Exception as exc:
        logger.exception("convert.internal_error", extra={"url": target_url})
        message = str(exc) or type(exc).__name__
        return error_response(f"Internal error: {message}", status.HTTP_500_INTERNAL_SERVER_ERROR)
    return json_response(document.to_payload())


@router.get("/")
async def convert_get(
    background_tasks: BackgroundTasks,
    url: str | None = None,
    pipeline: ConvertPipeline = Depends(get_pipeline),
) -> JSONResponse:
    return await _convert(url, pipeline, background_tasks)


@router.post("/")
async def convert_post(
    request: Request,
    background_tasks: BackgroundTasks,
    pipeline: ConvertPipeline = Depends(get_pipeline),
) -> JSONResponse:
    try:
        body = await request.json()
    except ValueError:
        return error_response(INVALID_JSON_MESSAGE)
    if not isinstance(body, dict):
        return error_response(INVALID_JSON_MESSAGE)
    url = body.get("url")
    return await _convert(url if isinstance(url, str) else None, pipeline, background_tasks)
