"""Integration tests for the assembled application."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from structlog.testing import capture_logs

from fastapi_middleware_pipeline.app import build_pipeline, create_app
from fastapi_middleware_pipeline.config import AppSettings, FeatureFlags
from fastapi_middleware_pipeline.pages import DEBUG_MESSAGE


def _settings(
    *,
    show_debug_info: bool = False,
    enable_logging: bool = False,
    environment: str = "Production",
) -> AppSettings:
    return AppSettings(
        environment=environment,
        features=FeatureFlags(
            show_debug_info=show_debug_info, enable_logging=enable_logging
        ),
    )


async def _get(app: FastAPI, path: str = "/") -> Any:
    transport = ASGITransport(app=app, client=("203.0.113.5", 51234))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


class TestBuildPipeline:
    def test_production_order(self) -> None:
        resolved = build_pipeline(_settings()).resolve()
        assert [s.name for s in resolved.stages] == [
            "ExceptionHandler",
            "SecurityHeaders",
            "ProcessingTime",
        ]

    def test_development_skips_exception_handler(self) -> None:
        resolved = build_pipeline(_settings(environment="Development")).resolve()
        assert [s.name for s in resolved.stages] == [
            "SecurityHeaders",
            "ProcessingTime",
        ]

    def test_enable_logging_adds_request_logging(self) -> None:
        resolved = build_pipeline(_settings(enable_logging=True)).resolve()
        assert [s.name for s in resolved.stages] == [
            "ExceptionHandler",
            "SecurityHeaders",
            "RequestLogging",
            "ProcessingTime",
        ]

    def test_show_debug_info_enables_trace(self) -> None:
        assert build_pipeline(_settings(show_debug_info=True)).resolve().debug is True
        assert build_pipeline(_settings()).resolve().debug is False


class TestIndexPage:
    async def test_debug_message_shown_when_enabled(self) -> None:
        app = create_app(_settings(show_debug_info=True))
        resp = await _get(app)
        assert resp.status_code == 200
        assert DEBUG_MESSAGE in resp.text

    async def test_debug_message_hidden_when_disabled(self) -> None:
        app = create_app(_settings(show_debug_info=False))
        resp = await _get(app)
        assert resp.status_code == 200
        assert DEBUG_MESSAGE not in resp.text

    async def test_response_headers(self) -> None:
        app = create_app(_settings())
        resp = await _get(app)
        assert float(resp.headers["x-elapsedtime"]) >= 0
        assert resp.headers["x-content-type-options"] == "nosniff"
        assert resp.headers["content-type"].startswith("text/html")

    async def test_request_logging_when_enabled(self) -> None:
        app = create_app(_settings(enable_logging=True))
        with capture_logs() as logs:
            await _get(app)
        events = [entry["event"] for entry in logs]
        assert events == [
            "request_started",
            "Request: GET / from 203.0.113.5",
            events[2],
            "request_finished",
        ]
        assert events[2].startswith("Response: 200 in ")

    async def test_request_logging_off_by_default(self) -> None:
        app = create_app(_settings())
        with capture_logs() as logs:
            await _get(app)
        assert "request_started" not in [entry["event"] for entry in logs]
