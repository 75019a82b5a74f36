from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from src.anything_md.config import AppConfig
from src.anything_md.converter.converter_client import ConversionService
from src.anything_md.converter.converter_models import (
    ConversionFailure,
    ConversionResult,
    NamedBlob,
)
from src.anything_md.fetch.fetch_client import ResilientFetcher
from src.anything_md.main import create_app
from tests.mocks.http_client import FakeHttp, no_sleep

pytestmark = pytest.mark.unit

TARGET = "https://example.com/posts/hello"


class StaticConverter(ConversionService):
    def __init__(self, outcome: ConversionResult | ConversionFailure) -> None:
        self.outcome = outcome

    async def convert(self, blob: NamedBlob) -> ConversionResult | ConversionFailure:
        return self.outcome


def build_client(tmp_path: Path, outcome: ConversionResult | ConversionFailure | None = None) -> TestClient:
    config = AppConfig(media_root=tmp_path, cors_origin="*")
    app = create_app(
        config,
        converter=StaticConverter(
            outcome
            or ConversionResult(name="hello.html", mime_type="text/html", tokens=3, text="# Hello")
        ),
        fetcher=ResilientFetcher(default_options=config.fetch_options(), sleep=no_sleep),
    )
    return TestClient(app)


@pytest.fixture
def html_origin(monkeypatch) -> FakeHttp:
    return FakeHttp(
        replies=[httpx.Response(200, text="<title>Hello</title>", headers={"content-type": "text/html"})]
    ).install(monkeypatch)


def test_usage_without_url(tmp_path):
    response = build_client(tmp_path).get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["usage"]["GET"] == "/?url=https://example.com"


def test_get_converts_url(tmp_path, html_origin):
    response = build_client(tmp_path).get("/", params={"url": TARGET})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "url": TARGET,
        "name": "hello.html",
        "mimeType": "text/html",
        "tokens": 3,
        "markdown": "# Hello",
    }
    assert html_origin.urls() == [TARGET]


def test_post_converts_url(tmp_path, html_origin):
    response = build_client(tmp_path).post("/", json={"url": TARGET})
    assert response.status_code == 200
    assert response.json()["markdown"] == "# Hello"


def test_post_invalid_json(tmp_path):
    response = build_client(tmp_path).post(
        "/", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": 'Invalid JSON body. Expected: { "url": "https://..." }',
    }


def test_invalid_url(tmp_path):
    response = build_client(tmp_path).get("/", params={"url": "notaurl"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid URL provided."}


def test_method_not_allowed(tmp_path):
    response = build_client(tmp_path).put("/", json={"url": TARGET})
    assert response.status_code == 405
    assert response.json() == {"success": False, "error": "Method not allowed. Use GET or POST."}


def test_upstream_status_maps_to_bad_gateway(tmp_path, monkeypatch):
    FakeHttp(replies=[httpx.Response(403)]).install(monkeypatch)
    response = build_client(tmp_path).get("/", params={"url": TARGET})
    assert response.status_code == 502
    assert response.json()["error"] == "Failed to fetch URL: 403 Forbidden"


def test_conversion_failure_maps_to_unprocessable(tmp_path, html_origin):
    client = build_client(tmp_path, ConversionFailure(kind="conversion_error", reason="Unsupported file type"))
    response = client.get("/", params={"url": TARGET})
    assert response.status_code == 422
    assert response.json()["error"] == "Conversion failed: Unsupported file type"


def test_transport_failure_maps_to_internal_error(tmp_path, monkeypatch):
    FakeHttp(replies=[httpx.ConnectError("connection refused")]).install(monkeypatch)
    response = build_client(tmp_path).get("/", params={"url": TARGET})
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal error: connection refused"}


def test_cors_preflight(tmp_path):
    response = build_client(tmp_path).options(
        "/",
        headers={
            "Origin": "https://app.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-max-age"] == "86400"
    assert "POST" in response.headers["access-control-allow-methods"]
