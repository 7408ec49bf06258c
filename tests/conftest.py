"""Shared pytest fixtures for fastapi-middleware-pipeline tests."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest
import structlog
from starlette.requests import Request

from fastapi_middleware_pipeline.context import RequestContext


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        client: tuple[str, int] | None = ("203.0.113.5", 51000),
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
            "client": client,
        }
        return Request(scope)

    return _make


@pytest.fixture
def make_context(make_request: Any) -> Any:
    """Factory for RequestContext around a fresh request."""

    def _make(**kwargs: Any) -> RequestContext:
        return RequestContext(request=make_request(**kwargs))

    return _make


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any structlog.configure() done by a test."""
    yield
    structlog.reset_defaults()
