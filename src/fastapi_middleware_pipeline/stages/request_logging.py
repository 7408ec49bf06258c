"""Request logging stage, enabled by the EnableLogging feature flag."""

from __future__ import annotations

from typing import Any

from fastapi_middleware_pipeline._types import NextStage
from fastapi_middleware_pipeline.context import RequestContext
from fastapi_middleware_pipeline.logs import get_logger
from fastapi_middleware_pipeline.stage import PipelineStage

_logger = get_logger(__name__)


class RequestLogging(PipelineStage):
    """Logs request details before the chain and the outcome after it."""

    def __init__(self, logger: Any = None) -> None:
        self._logger = logger if logger is not None else _logger

    async def handle(self, ctx: RequestContext, call_next: NextStage) -> None:
        request = ctx.request
        self._logger.info(
            "request_started",
            method=ctx.method,
            path=ctx.path,
            query=request.url.query or None,
            user_agent=request.headers.get("user-agent"),
            client=ctx.client_host,
        )
        await call_next(ctx)
        self._logger.info(
            "request_finished",
            method=ctx.method,
            path=ctx.path,
            status_code=ctx.status_code,
        )
